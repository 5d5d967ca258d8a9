"""Photopick catalog database layer."""

from photopick.db.connection import Database
from photopick.db.migrations import MIGRATIONS, run_migrations
from photopick.db.schema import initialize

__all__ = [
    "Database",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
]
