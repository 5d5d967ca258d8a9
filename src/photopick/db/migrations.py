"""Forward-only migration runner for the catalog schema."""

from __future__ import annotations

import sqlite3

# schema_version is the bootstrap table, created before migrations run.
_CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version     INTEGER NOT NULL,
    applied_at  DATETIME NOT NULL DEFAULT (datetime('now'))
)
"""

_V1_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id               TEXT PRIMARY KEY,
    name             TEXT NOT NULL,
    email            TEXT NOT NULL DEFAULT '',
    contact          TEXT NOT NULL DEFAULT '',
    role             TEXT NOT NULL DEFAULT 'user',
    drive_folder_id  TEXT NOT NULL DEFAULT '',
    selection_limit  INTEGER NOT NULL DEFAULT 150,
    is_finalized     INTEGER NOT NULL DEFAULT 0,
    created_at       DATETIME NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS photos (
    id                 TEXT PRIMARY KEY,
    owner_id           TEXT NOT NULL,
    name               TEXT NOT NULL,
    path               TEXT NOT NULL,
    source_folder_id   TEXT NOT NULL,
    display_locator    TEXT NOT NULL,
    thumbnail_locator  TEXT NOT NULL,
    discovered_at      TEXT NOT NULL,
    classification     TEXT CHECK (classification IN ('selected', 'later'))
);

CREATE INDEX IF NOT EXISTS idx_photos_owner ON photos(owner_id);

CREATE TABLE IF NOT EXISTS resume_state (
    owner_id       TEXT PRIMARY KEY,
    last_index     INTEGER NOT NULL DEFAULT 0,
    last_asset_id  TEXT,
    last_folder    TEXT,
    updated_at     TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS activity_logs (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id    TEXT NOT NULL,
    action     TEXT NOT NULL,
    details    TEXT NOT NULL DEFAULT '',
    timestamp  TEXT NOT NULL
);
"""

# Append-only. Each entry: (version: int, sql: str).
# executescript() issues an implicit COMMIT before running.
MIGRATIONS: list[tuple[int, str]] = [
    (1, _V1_SQL),
]


def run_migrations(conn: sqlite3.Connection) -> None:
    """Apply all pending migrations in ascending version order.

    Idempotent: safe to call on a database at any version.
    """
    conn.execute(_CREATE_SCHEMA_VERSION)
    conn.commit()

    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    current = row[0] if row[0] is not None else 0

    for version, sql in MIGRATIONS:
        if version > current:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (version,)
            )
            conn.commit()
