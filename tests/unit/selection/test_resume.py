"""Tests for ResumeCursor — best-effort per-user navigation state."""

from __future__ import annotations

import logging
import sqlite3
from unittest.mock import patch

from photopick.selection.resume import ResumeCursor


def test_save_then_load(repo):
    cursor = ResumeCursor(repo)
    assert cursor.save("u1", 7, "asset42") is True

    state = cursor.load("u1")
    assert state.last_index == 7
    assert state.last_asset_id == "asset42"
    assert state.updated_at


def test_load_unknown_owner_is_none(repo):
    assert ResumeCursor(repo).load("nobody") is None


def test_partial_save_merges(repo):
    cursor = ResumeCursor(repo)
    cursor.save("u1", 7, "asset42", folder="Root")
    cursor.save("u1", folder="Root/S")

    state = cursor.load("u1")
    assert (state.last_index, state.last_asset_id, state.last_folder) == (7, "asset42", "Root/S")


def test_first_save_without_index_defaults_to_zero(repo):
    cursor = ResumeCursor(repo)
    cursor.save("u1", asset_id="a1")
    assert cursor.load("u1").last_index == 0


def test_negative_index_ignored(repo):
    cursor = ResumeCursor(repo)
    cursor.save("u1", 3)
    cursor.save("u1", -1, "a9")
    state = cursor.load("u1")
    assert state.last_index == 3
    assert state.last_asset_id == "a9"


def test_cursors_are_per_owner(repo):
    cursor = ResumeCursor(repo)
    cursor.save("u1", 1)
    cursor.save("u2", 9)
    assert cursor.load("u1").last_index == 1
    assert cursor.load("u2").last_index == 9


def test_save_failure_is_swallowed(repo, caplog):
    with patch.object(repo, "merge_resume", side_effect=sqlite3.OperationalError("locked")):
        with caplog.at_level(logging.WARNING, logger="photopick.resume"):
            assert ResumeCursor(repo).save("u1", 2) is False
    assert "Error saving selection state" in caplog.text


def test_load_failure_returns_none(repo):
    with patch.object(repo, "get_resume", side_effect=sqlite3.OperationalError("locked")):
        assert ResumeCursor(repo).load("u1") is None


def test_resume_index(repo):
    cursor = ResumeCursor(repo)
    assert cursor.resume_index("u1", 10) is None
    cursor.save("u1", 4)
    assert cursor.resume_index("u1", 10) == 4
    # Gallery shrank below the saved position.
    assert cursor.resume_index("u1", 3) is None
