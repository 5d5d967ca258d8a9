"""Tests for TreeWalker — recursive discovery over a folder source."""

from __future__ import annotations

import asyncio

import pytest

from photopick.drive.walker import TreeWalker
from photopick.errors import ProviderUnavailable


def _discover(source, folder_id="R", name="Root", max_concurrency=0):
    return asyncio.run(TreeWalker(source, max_concurrency).discover(folder_id, name))


# --- Tree shape ---

def test_discover_scenario_tree(scenario_drive):
    root = _discover(scenario_drive)

    assert (root.id, root.name, root.asset_ids) == ("R", "Root", ["a1"])
    assert len(root.children) == 1
    child = root.children[0]
    assert (child.id, child.name, child.asset_ids, child.children) == ("S", "S", ["a2", "a3"], [])


def test_discover_empty_folder(make_drive):
    root = _discover(make_drive())
    assert root.children == []
    assert root.asset_ids == []


def test_children_keep_provider_order(make_drive):
    drive = make_drive(folders={"R": [("z", "Zeta"), ("a", "Alpha"), ("m", "Mu")]})
    root = _discover(drive)
    assert [c.name for c in root.children] == ["Zeta", "Alpha", "Mu"]


def test_unnamed_child_falls_back_to_id(make_drive):
    drive = make_drive(folders={"R": [("S1", "")]}, images={"S1": ["x"]})
    root = _discover(drive)
    assert root.children[0].name == "S1"


def test_each_folder_queried_once_per_kind(make_drive):
    drive = make_drive(folders={"R": [("A", "A"), ("B", "B")], "A": [("C", "C")]})
    _discover(drive)
    assert sorted(drive.calls) == sorted(
        (kind, fid) for fid in ("R", "A", "B", "C") for kind in ("folders", "images")
    )


# --- Concurrency ---

def test_siblings_walked_concurrently(make_drive):
    drive = make_drive(
        folders={"R": [(f"S{i}", f"S{i}") for i in range(4)]},
        delay=0.01,
    )
    _discover(drive)
    # Both queries of all four siblings overlap.
    assert drive.max_in_flight == 8


def test_max_concurrency_caps_provider_calls(make_drive):
    drive = make_drive(
        folders={"R": [(f"S{i}", f"S{i}") for i in range(6)], "S0": [("D", "Deep")]},
        images={"D": ["d1"]},
        delay=0.01,
    )
    root = _discover(drive, max_concurrency=2)
    assert drive.max_in_flight <= 2
    assert root.children[0].children[0].asset_ids == ["d1"]


# --- Errors ---

def test_empty_display_name_rejected(scenario_drive):
    with pytest.raises(ValueError, match="display_name"):
        _discover(scenario_drive, name="")
    assert scenario_drive.calls == []


def test_nested_failure_aborts_walk(make_drive):
    drive = make_drive(
        folders={"R": [("S", "S")]},
        images={"R": ["a1"], "S": ["a2"]},
        fail_on={"S"},
    )
    with pytest.raises(ProviderUnavailable, match="S"):
        _discover(drive)
