"""Helpers shared by CLI commands: config and catalog access."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import typer
from rich.console import Console

from photopick.cli.errors import err_config, err_no_db
from photopick.config import ConfigError, PhotopickConfig, load_config
from photopick.db.connection import Database
from photopick.db.schema import initialize

console = Console()


def load_cfg() -> PhotopickConfig:
    """Load config, turning ConfigError into an actionable exit."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from exc


def resolve_db(db: Path | None, cfg: PhotopickConfig) -> Path:
    return db if db is not None else Path(cfg.catalog.db)


def open_db(db_path: Path, *, must_exist: bool = True) -> sqlite3.Connection:
    """Open the catalog, exiting with a hint if it has not been created."""
    if must_exist and not db_path.exists():
        console.print(err_no_db(str(db_path)))
        raise typer.Exit(1)
    conn = Database(db_path).connect()
    initialize(conn)
    return conn
