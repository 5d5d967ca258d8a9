"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio

import pytest

from photopick.db.connection import Database
from photopick.db.repository import Repository
from photopick.db.schema import initialize
from photopick.drive.client import FOLDER_MIME_TYPE
from photopick.drive.models import DriveEntry
from photopick.errors import ProviderUnavailable


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".photopick.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def repo(tmp_db):
    return Repository(tmp_db)


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep tests away from ~/.photopick and any PHOTOPICK_* variables in the shell."""
    monkeypatch.setattr("photopick.config._GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    for var in ("PHOTOPICK_DRIVE_API_KEY", "PHOTOPICK_ROOT_FOLDER_ID", "PHOTOPICK_DB"):
        monkeypatch.delenv(var, raising=False)


class FakeDrive:
    """In-memory folder source for TreeWalker.

    Args:
        folders: parent id → [(child id, child name), ...]
        images: folder id → [asset id, ...]
        fail_on: folder ids whose listing raises ProviderUnavailable.
        delay: seconds each listing sleeps, to make overlap observable.
    """

    def __init__(self, folders=None, images=None, fail_on=(), delay=0.0):
        self.folders = folders or {}
        self.images = images or {}
        self.fail_on = set(fail_on)
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def list_child_folders(self, folder_id):
        await self._enter("folders", folder_id)
        try:
            return [
                DriveEntry(id=cid, name=name, mime_type=FOLDER_MIME_TYPE)
                for cid, name in self.folders.get(folder_id, [])
            ]
        finally:
            self.in_flight -= 1

    async def list_child_images(self, folder_id):
        await self._enter("images", folder_id)
        try:
            return [
                DriveEntry(id=aid, name=f"{aid}.jpg", mime_type="image/jpeg")
                for aid in self.images.get(folder_id, [])
            ]
        finally:
            self.in_flight -= 1

    async def _enter(self, kind, folder_id):
        self.calls.append((kind, folder_id))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(self.delay)
        if folder_id in self.fail_on:
            self.in_flight -= 1
            raise ProviderUnavailable(f"boom listing {folder_id}")


@pytest.fixture
def scenario_drive():
    """Root R holds a1 and sub-folder S holding a2, a3."""
    return FakeDrive(
        folders={"R": [("S", "S")]},
        images={"R": ["a1"], "S": ["a2", "a3"]},
    )


@pytest.fixture
def make_drive():
    """Factory for FakeDrive instances with custom trees."""
    return FakeDrive
