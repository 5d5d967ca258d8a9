"""Tests for CatalogReconciler — idempotent, non-destructive catalog merge."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from unittest.mock import patch

import pytest

from photopick.db.models import Classification, UserProfile
from photopick.drive.models import AssetGroup
from photopick.drive.walker import TreeWalker
from photopick.errors import ProviderUnavailable, SyncConfigError, UserNotFound
from photopick.sync.reconciler import SYNC_ACTION, CatalogReconciler


def _groups():
    return [
        AssetGroup(path="Root", source_folder_id="R", asset_ids=("a1",)),
        AssetGroup(path="Root/S", source_folder_id="S", asset_ids=("a2", "a3")),
    ]


def _reconciler(repo, source=None, **kwargs):
    walker = TreeWalker(source) if source is not None else None
    return CatalogReconciler(repo, walker, **kwargs)


# ------------------------------------------------------------------
# reconcile()
# ------------------------------------------------------------------


def test_reconcile_creates_records(repo):
    result = asyncio.run(_reconciler(repo).reconcile(_groups(), "u1"))

    assert (result.synced, result.errors) == (3, 0)
    a2 = repo.get_photo("a2")
    assert a2.owner_id == "u1"
    assert a2.name == "Root/S/a2"
    assert a2.path == "Root/S"
    assert a2.source_folder_id == "S"
    assert a2.display_locator == "https://drive.google.com/uc?export=view&id=a2"
    assert a2.thumbnail_locator == "https://drive.google.com/thumbnail?id=a2&sz=w400"
    assert a2.classification is None


def test_reconcile_thumbnail_size(repo):
    asyncio.run(_reconciler(repo, thumbnail_size=1200).reconcile(_groups(), "u1"))
    assert repo.get_photo("a1").thumbnail_locator.endswith("&sz=w1200")


def test_reconcile_is_idempotent(repo):
    reconciler = _reconciler(repo)
    asyncio.run(reconciler.reconcile(_groups(), "u1"))
    asyncio.run(reconciler.reconcile(_groups(), "u1"))
    assert repo.count_photos("u1") == 3


def test_reconcile_keeps_classifications(repo):
    reconciler = _reconciler(repo)
    asyncio.run(reconciler.reconcile(_groups(), "u1"))
    repo.set_classification("a2", Classification.SELECTED)
    repo.set_classification("a3", Classification.LATER)

    moved = [AssetGroup(path="Root/Moved", source_folder_id="M", asset_ids=("a2", "a3"))]
    asyncio.run(reconciler.reconcile(moved, "u1"))

    assert repo.get_photo("a2").classification is Classification.SELECTED
    assert repo.get_photo("a2").path == "Root/Moved"
    assert repo.get_photo("a3").classification is Classification.LATER


def test_reconcile_never_deletes(repo):
    reconciler = _reconciler(repo)
    asyncio.run(reconciler.reconcile(_groups(), "u1"))
    asyncio.run(reconciler.reconcile(_groups()[:1], "u1"))
    assert repo.get_photo("a3") is not None


def test_reconcile_empty_groups(repo):
    result = asyncio.run(_reconciler(repo).reconcile([], "u1"))
    assert (result.synced, result.errors) == (0, 0)


def test_reconcile_isolates_per_asset_failures(repo, caplog):
    original = repo.upsert_discovered

    def flaky(record):
        if record.id == "a2":
            raise sqlite3.OperationalError("disk I/O error")
        original(record)

    with patch.object(repo, "upsert_discovered", side_effect=flaky):
        with caplog.at_level(logging.ERROR, logger="photopick.sync"):
            result = asyncio.run(_reconciler(repo).reconcile(_groups(), "u1"))

    assert (result.synced, result.errors) == (2, 1)
    assert repo.get_photo("a1") is not None
    assert repo.get_photo("a2") is None
    assert repo.get_photo("a3") is not None
    assert "a2" in caplog.text
    assert "Root/S" in caplog.text


# ------------------------------------------------------------------
# sync_folder()
# ------------------------------------------------------------------


def test_sync_folder_end_to_end(repo, scenario_drive):
    result = asyncio.run(_reconciler(repo, scenario_drive).sync_folder("R", "u1"))

    assert (result.synced, result.errors) == (3, 0)
    assert [r.id for r in repo.list_photos("u1")] == ["a1", "a2", "a3"]
    entry = repo.list_activity("u1")[0]
    assert entry.action == SYNC_ACTION
    assert entry.details == "Synced 3 photos from folder R. 0 errors."


def test_sync_folder_root_name_used_in_paths(repo, scenario_drive):
    asyncio.run(_reconciler(repo, scenario_drive).sync_folder("R", "u1", root_name="Wedding"))
    assert repo.get_photo("a3").name == "Wedding/S/a3"


def test_sync_folder_discovery_failure_writes_nothing(repo, make_drive):
    drive = make_drive(folders={"R": [("S", "S")]}, images={"R": ["a1"]}, fail_on={"S"})
    with pytest.raises(ProviderUnavailable):
        asyncio.run(_reconciler(repo, drive).sync_folder("R", "u1"))
    assert repo.count_photos() == 0
    assert repo.list_activity() == []


def test_sync_folder_requires_folder_id(repo, scenario_drive):
    with pytest.raises(SyncConfigError):
        asyncio.run(_reconciler(repo, scenario_drive).sync_folder("", "u1"))


def test_sync_folder_requires_walker(repo):
    with pytest.raises(SyncConfigError, match="TreeWalker"):
        asyncio.run(_reconciler(repo).sync_folder("R", "u1"))


def test_sync_folder_survives_activity_log_failure(repo, scenario_drive):
    with patch.object(repo, "log_activity", side_effect=sqlite3.OperationalError("locked")):
        result = asyncio.run(_reconciler(repo, scenario_drive).sync_folder("R", "u1"))
    assert result.synced == 3


# ------------------------------------------------------------------
# sync_user()
# ------------------------------------------------------------------


def test_sync_user_uses_profile_folder(repo, scenario_drive):
    repo.add_user(UserProfile(id="u1", name="Ana", drive_folder_id="R"))
    result = asyncio.run(_reconciler(repo, scenario_drive).sync_user("u1"))
    assert result.synced == 3
    assert ("folders", "R") in scenario_drive.calls


def test_sync_user_falls_back_to_default_folder(repo, scenario_drive):
    repo.add_user(UserProfile(id="u1", name="Ana"))
    reconciler = _reconciler(repo, scenario_drive, default_root_folder="R")
    assert asyncio.run(reconciler.sync_user("u1")).synced == 3


def test_sync_user_unknown_user(repo, scenario_drive):
    with pytest.raises(UserNotFound):
        asyncio.run(_reconciler(repo, scenario_drive).sync_user("ghost"))


def test_sync_user_without_any_folder(repo, scenario_drive):
    repo.add_user(UserProfile(id="u1", name="Ana"))
    with pytest.raises(SyncConfigError, match="u1"):
        asyncio.run(_reconciler(repo, scenario_drive).sync_user("u1"))
    assert scenario_drive.calls == []


def test_sync_user_root_name_used_in_paths(repo, scenario_drive):
    repo.add_user(UserProfile(id="u1", name="Ana", drive_folder_id="R"))
    asyncio.run(_reconciler(repo, scenario_drive).sync_user("u1", root_name="Wedding"))
    assert repo.get_photo("a3").path == "Wedding/S"


def test_sync_activity_written_off_the_event_loop_thread(repo, scenario_drive):
    original = repo.log_activity
    threads = []

    def record(*args, **kwargs):
        threads.append(threading.get_ident())
        return original(*args, **kwargs)

    with patch.object(repo, "log_activity", side_effect=record):
        asyncio.run(_reconciler(repo, scenario_drive).sync_folder("R", "u1"))

    assert len(threads) == 1
    assert threads[0] != threading.get_ident()
    assert repo.list_activity("u1")[0].action == SYNC_ACTION
