"""End-to-end: discover → flatten → reconcile → classify → re-sync → resume."""

from __future__ import annotations

import asyncio

from photopick.db.models import Classification, UserProfile
from photopick.drive.flatten import flatten
from photopick.drive.models import AssetGroup
from photopick.drive.walker import TreeWalker
from photopick.selection.machine import RejectReason
from photopick.selection.resume import ResumeCursor
from photopick.selection.service import SelectionService
from photopick.sync.reconciler import CatalogReconciler


def test_root_with_one_subfolder(repo, scenario_drive):
    walker = TreeWalker(scenario_drive, max_concurrency=4)

    tree = asyncio.run(walker.discover("R", "Root"))
    groups = flatten(tree)
    assert groups == [
        AssetGroup(path="Root", source_folder_id="R", asset_ids=("a1",)),
        AssetGroup(path="Root/S", source_folder_id="S", asset_ids=("a2", "a3")),
    ]

    reconciler = CatalogReconciler(repo, walker)
    result = asyncio.run(reconciler.reconcile(groups, "U"))
    assert (result.synced, result.errors) == (3, 0)
    assert [r.name for r in repo.list_photos("U")] == ["Root/a1", "Root/S/a2", "Root/S/a3"]


def test_classification_survives_resync(repo, scenario_drive):
    repo.add_user(UserProfile(id="U", name="Ana", drive_folder_id="R", selection_limit=2))
    reconciler = CatalogReconciler(repo, TreeWalker(scenario_drive))
    asyncio.run(reconciler.sync_user("U"))

    service = SelectionService(repo)
    assert service.classify("U", "a1", Classification.SELECTED).accepted
    assert service.classify("U", "a2", Classification.SELECTED).accepted
    assert service.classify("U", "a3", Classification.SELECTED).reason is RejectReason.LIMIT_REACHED
    assert service.classify("U", "a3", Classification.LATER).accepted

    asyncio.run(reconciler.sync_user("U"))

    snapshot = service.gallery("U")
    assert [(r.id, r.classification) for r in snapshot.records] == [
        ("a1", Classification.SELECTED),
        ("a2", Classification.SELECTED),
        ("a3", Classification.LATER),
    ]
    assert snapshot.at_limit


def test_resume_round_trip(repo):
    cursor = ResumeCursor(repo)
    cursor.save("U", 7, "asset42")
    state = cursor.load("U")
    assert (state.last_index, state.last_asset_id) == (7, "asset42")
    assert cursor.load("someone-else") is None
