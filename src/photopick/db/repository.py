"""Repository pattern for all photopick catalog operations.

Single interface for: user profiles, catalog records, resume state, activity log.

Every write is a merge: statements name only the columns they own, so the
reconciliation path (descriptive columns) and the selection path
(``classification``) never overwrite each other.
"""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime, timezone

from photopick.db.models import (
    ActivityEntry,
    CatalogRecord,
    Classification,
    ResumeState,
    UserProfile,
)


def utc_now() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class Repository:
    """Data access layer for all photopick database entities.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use. Statements are serialized with a lock so
    the repository can be driven from ``asyncio.to_thread`` workers.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see photopick.db.schema.initialize).
        """
        self._conn = conn
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def add_user(self, user: UserProfile) -> None:
        """Insert a new user profile.

        Args:
            user: UserProfile instance to persist.
        """
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO users
                    (id, name, email, contact, role, drive_folder_id, selection_limit, is_finalized)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user.id,
                    user.name,
                    user.email,
                    user.contact,
                    user.role,
                    user.drive_folder_id,
                    user.selection_limit,
                    int(user.is_finalized),
                ),
            )
            self._conn.commit()

    def get_user(self, user_id: str) -> UserProfile | None:
        """Return a user profile by ID, or None if not found."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        return _row_to_user(row) if row else None

    def list_users(self) -> list[UserProfile]:
        """Return all user profiles ordered by creation time (oldest first)."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM users ORDER BY created_at, id"
            ).fetchall()
        return [_row_to_user(r) for r in rows]

    def set_selection_limit(self, user_id: str, limit: int) -> bool:
        """Update a user's selection cap. Returns False if the user is unknown."""
        return self._update_user(user_id, "selection_limit", limit)

    def set_drive_folder(self, user_id: str, folder_id: str) -> bool:
        """Update the Drive folder synced for a user. Returns False if unknown."""
        return self._update_user(user_id, "drive_folder_id", folder_id)

    def set_finalized(self, user_id: str, finalized: bool = True) -> bool:
        """Mark a user's selection as finalized. Returns False if unknown."""
        return self._update_user(user_id, "is_finalized", int(finalized))

    def _update_user(self, user_id: str, column: str, value: object) -> bool:
        with self._lock:
            cur = self._conn.execute(
                f"UPDATE users SET {column} = ? WHERE id = ?",  # noqa: S608
                (value, user_id),
            )
            self._conn.commit()
        return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Catalog records
    # ------------------------------------------------------------------

    def upsert_discovered(self, record: CatalogRecord) -> None:
        """Insert or refresh the descriptive columns of a catalog record.

        ``classification`` is absent from the UPDATE clause: a new row starts
        unclassified and an existing row keeps whatever it already holds.

        Args:
            record: Record carrying the freshly discovered descriptive fields.
                Its ``classification`` attribute is ignored.
        """
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO photos
                    (id, owner_id, name, path, source_folder_id,
                     display_locator, thumbnail_locator, discovered_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    owner_id          = excluded.owner_id,
                    name              = excluded.name,
                    path              = excluded.path,
                    source_folder_id  = excluded.source_folder_id,
                    display_locator   = excluded.display_locator,
                    thumbnail_locator = excluded.thumbnail_locator,
                    discovered_at     = excluded.discovered_at
                """,
                (
                    record.id,
                    record.owner_id,
                    record.name,
                    record.path,
                    record.source_folder_id,
                    record.display_locator,
                    record.thumbnail_locator,
                    record.discovered_at,
                ),
            )
            self._conn.commit()

    def get_photo(self, asset_id: str) -> CatalogRecord | None:
        """Return a catalog record by asset ID, or None if not found."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM photos WHERE id = ?", (asset_id,)
            ).fetchone()
        return _row_to_record(row) if row else None

    def list_photos(
        self, owner_id: str, classification: Classification | None = None
    ) -> list[CatalogRecord]:
        """Return an owner's records ordered by folder path, then asset id.

        Args:
            owner_id: User whose catalog subset to return.
            classification: Optional filter on a single classification.
        """
        sql = "SELECT * FROM photos WHERE owner_id = ?"
        params: list[object] = [owner_id]
        if classification is not None:
            sql += " AND classification = ?"
            params.append(classification.value)
        sql += " ORDER BY path, id"
        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [_row_to_record(r) for r in rows]

    def count_photos(self, owner_id: str | None = None) -> int:
        """Return the number of catalog records, optionally for one owner."""
        with self._lock:
            if owner_id is None:
                return self._conn.execute("SELECT COUNT(*) FROM photos").fetchone()[0]
            return self._conn.execute(
                "SELECT COUNT(*) FROM photos WHERE owner_id = ?", (owner_id,)
            ).fetchone()[0]

    def count_selected(self, owner_id: str) -> int:
        """Return how many of *owner_id*'s records are classified ``selected``."""
        with self._lock:
            return self._conn.execute(
                "SELECT COUNT(*) FROM photos WHERE owner_id = ? AND classification = ?",
                (owner_id, Classification.SELECTED.value),
            ).fetchone()[0]

    def set_classification(self, asset_id: str, classification: Classification) -> bool:
        """Write only the ``classification`` column. Returns False if no such record."""
        with self._lock:
            cur = self._conn.execute(
                "UPDATE photos SET classification = ? WHERE id = ?",
                (classification.value, asset_id),
            )
            self._conn.commit()
        return cur.rowcount > 0

    def delete_photo(self, asset_id: str) -> bool:
        """Delete a catalog record. Returns False if it did not exist."""
        with self._lock:
            cur = self._conn.execute("DELETE FROM photos WHERE id = ?", (asset_id,))
            self._conn.commit()
        return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Resume state
    # ------------------------------------------------------------------

    def merge_resume(
        self,
        owner_id: str,
        *,
        updated_at: str,
        last_index: int | None = None,
        last_asset_id: str | None = None,
        last_folder: str | None = None,
    ) -> None:
        """Upsert resume state, changing only the fields that are not None.

        ``updated_at`` is always written. A first write without an index
        stores 0.
        """
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO resume_state
                    (owner_id, last_index, last_asset_id, last_folder, updated_at)
                VALUES (?, COALESCE(?, 0), ?, ?, ?)
                ON CONFLICT(owner_id) DO UPDATE SET
                    last_index    = COALESCE(?, resume_state.last_index),
                    last_asset_id = COALESCE(excluded.last_asset_id, resume_state.last_asset_id),
                    last_folder   = COALESCE(excluded.last_folder, resume_state.last_folder),
                    updated_at    = excluded.updated_at
                """,
                (
                    owner_id,
                    last_index,
                    last_asset_id,
                    last_folder,
                    updated_at,
                    last_index,
                ),
            )
            self._conn.commit()

    def get_resume(self, owner_id: str) -> ResumeState | None:
        """Return saved resume state for *owner_id*, or None if absent."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM resume_state WHERE owner_id = ?", (owner_id,)
            ).fetchone()
        if row is None:
            return None
        return ResumeState(
            owner_id=row["owner_id"],
            last_index=row["last_index"],
            last_asset_id=row["last_asset_id"],
            last_folder=row["last_folder"],
            updated_at=row["updated_at"],
        )

    # ------------------------------------------------------------------
    # Activity log
    # ------------------------------------------------------------------

    def log_activity(self, user_id: str, action: str, details: str = "") -> int:
        """Append an activity entry and return its rowid."""
        with self._lock:
            cur = self._conn.execute(
                "INSERT INTO activity_logs (user_id, action, details, timestamp) VALUES (?, ?, ?, ?)",
                (user_id, action, details, utc_now()),
            )
            self._conn.commit()
        return cur.lastrowid

    def list_activity(
        self, user_id: str | None = None, limit: int | None = None
    ) -> list[ActivityEntry]:
        """Return activity entries, newest first."""
        sql = "SELECT * FROM activity_logs"
        params: list[object] = []
        if user_id is not None:
            sql += " WHERE user_id = ?"
            params.append(user_id)
        sql += " ORDER BY id DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        with self._lock:
            rows = self._conn.execute(sql, params).fetchall()
        return [
            ActivityEntry(
                id=r["id"],
                user_id=r["user_id"],
                action=r["action"],
                details=r["details"],
                timestamp=r["timestamp"],
            )
            for r in rows
        ]


# ------------------------------------------------------------------
# Row → model helpers
# ------------------------------------------------------------------

def _row_to_user(row: sqlite3.Row) -> UserProfile:
    return UserProfile(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        contact=row["contact"],
        role=row["role"],
        drive_folder_id=row["drive_folder_id"],
        selection_limit=row["selection_limit"],
        is_finalized=bool(row["is_finalized"]),
        created_at=row["created_at"],
    )


def _row_to_record(row: sqlite3.Row) -> CatalogRecord:
    return CatalogRecord(
        id=row["id"],
        owner_id=row["owner_id"],
        name=row["name"],
        path=row["path"],
        source_folder_id=row["source_folder_id"],
        display_locator=row["display_locator"],
        thumbnail_locator=row["thumbnail_locator"],
        discovered_at=row["discovered_at"],
        classification=Classification.from_db(row["classification"]),
    )
