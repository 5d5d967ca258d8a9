"""Merge discovered Drive assets into the photo catalog.

Reconciliation is idempotent and non-destructive: each asset is upserted by
its provider id and only the descriptive columns are written, so a
classification set by the client survives any number of re-syncs, including
ones that overlap with a live classification write.

A failed upsert is logged and counted; the rest of the batch carries on.
A failed discovery aborts the run before anything is written.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from dataclasses import dataclass

from photopick.db.models import CatalogRecord
from photopick.db.repository import Repository, utc_now
from photopick.drive.client import display_locator, thumbnail_locator
from photopick.drive.flatten import flatten
from photopick.drive.models import AssetGroup
from photopick.drive.walker import TreeWalker
from photopick.errors import SyncConfigError, UserNotFound

logger = logging.getLogger("photopick.sync")

SYNC_ACTION = "Drive Sync"


@dataclass
class SyncResult:
    """Aggregate outcome of one reconciliation run."""

    synced: int = 0
    errors: int = 0


class CatalogReconciler:
    """Upsert asset groups into the catalog and drive full folder syncs.

    Args:
        repo: Catalog repository.
        walker: TreeWalker used by sync_folder()/sync_user(). Not needed for
            reconcile() alone.
        thumbnail_size: Width passed to the thumbnail locator.
        default_root_folder: Folder synced for users without their own.
    """

    def __init__(
        self,
        repo: Repository,
        walker: TreeWalker | None = None,
        *,
        thumbnail_size: int = 400,
        default_root_folder: str = "",
    ) -> None:
        self.repo = repo
        self.walker = walker
        self.thumbnail_size = thumbnail_size
        self.default_root_folder = default_root_folder

    async def reconcile(self, groups: list[AssetGroup], owner_id: str) -> SyncResult:
        """Upsert every asset of every group for *owner_id*.

        Upserts are issued in list order without waiting on each other and
        joined before returning; completion order is not guaranteed.

        Returns:
            SyncResult with the number of successful and failed upserts.
        """
        pairs = [(group, asset_id) for group in groups for asset_id in group.asset_ids]
        outcomes = await asyncio.gather(
            *(self._upsert(group, asset_id, owner_id) for group, asset_id in pairs),
            return_exceptions=True,
        )

        result = SyncResult()
        for (group, asset_id), outcome in zip(pairs, outcomes):
            if isinstance(outcome, BaseException):
                result.errors += 1
                logger.error(
                    "Error syncing asset %s from %r: %s",
                    asset_id,
                    group.path,
                    outcome,
                    exc_info=outcome,
                )
            else:
                result.synced += 1

        logger.info(
            "Reconciled %d assets for %s (%d errors)", result.synced, owner_id, result.errors
        )
        return result

    async def _upsert(self, group: AssetGroup, asset_id: str, owner_id: str) -> None:
        record = CatalogRecord(
            id=asset_id,
            owner_id=owner_id,
            name=f"{group.path}/{asset_id}",
            path=group.path,
            source_folder_id=group.source_folder_id,
            display_locator=display_locator(asset_id),
            thumbnail_locator=thumbnail_locator(asset_id, self.thumbnail_size),
            discovered_at=utc_now(),
        )
        await asyncio.to_thread(self.repo.upsert_discovered, record)

    async def sync_folder(
        self, root_folder_id: str, owner_id: str, root_name: str = "Root"
    ) -> SyncResult:
        """Discover *root_folder_id*, flatten it, and reconcile it for *owner_id*.

        Raises:
            SyncConfigError: If no folder id or walker is available.
            ProviderUnavailable: If discovery fails; nothing is written.
        """
        if not root_folder_id:
            raise SyncConfigError("No Drive folder id given for sync.")
        if self.walker is None:
            raise SyncConfigError("CatalogReconciler needs a TreeWalker to sync folders.")

        tree = await self.walker.discover(root_folder_id, root_name)
        groups = flatten(tree)
        result = await self.reconcile(groups, owner_id)
        await asyncio.to_thread(
            self._record_activity,
            owner_id,
            f"Synced {result.synced} photos from folder {root_folder_id}. "
            f"{result.errors} errors.",
        )
        return result

    async def sync_user(self, user_id: str, root_name: str = "Root") -> SyncResult:
        """Sync the Drive folder configured on *user_id*'s profile.

        Falls back to *default_root_folder* when the profile has none.
        *root_name* labels the root folder in photo paths.

        Raises:
            UserNotFound: If the profile does not exist.
            SyncConfigError: If neither the profile nor the default names a folder.
        """
        user = await asyncio.to_thread(self.repo.get_user, user_id)
        if user is None:
            raise UserNotFound(f"No user with id '{user_id}'.")
        folder_id = user.drive_folder_id or self.default_root_folder
        if not folder_id:
            raise SyncConfigError(f"User '{user_id}' has no Drive folder configured.")
        return await self.sync_folder(folder_id, user_id, root_name)

    def _record_activity(self, user_id: str, details: str) -> None:
        try:
            self.repo.log_activity(user_id, SYNC_ACTION, details)
        except sqlite3.Error as exc:
            logger.warning("Could not record sync activity for %s: %s", user_id, exc)
