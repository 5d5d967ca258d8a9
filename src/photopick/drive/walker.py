"""Recursive Drive folder discovery."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from photopick.drive.models import DriveEntry, FolderNode

logger = logging.getLogger("photopick.drive.walker")

_Lister = Callable[[str], Awaitable[list[DriveEntry]]]


class FolderSource(Protocol):
    """Anything that can list a folder's sub-folders and images."""

    async def list_child_folders(self, folder_id: str) -> list[DriveEntry]: ...

    async def list_child_images(self, folder_id: str) -> list[DriveEntry]: ...


class TreeWalker:
    """Build a full FolderNode tree rooted at a provider folder.

    Each folder issues its two listing queries concurrently, then all of its
    sub-folders are walked concurrently and awaited together, so wall-clock
    time follows tree depth rather than node count.

    *max_concurrency* caps simultaneous provider queries (0 = unbounded). The
    semaphore wraps only the listing calls, never a recursion.
    """

    def __init__(self, source: FolderSource, max_concurrency: int = 0) -> None:
        self.source = source
        self.max_concurrency = max_concurrency

    async def discover(self, folder_id: str, display_name: str) -> FolderNode:
        """Walk *folder_id* and everything beneath it.

        Args:
            folder_id: Provider folder identifier for the root.
            display_name: Label for the root node; must be non-empty.

        Returns:
            Fully materialized FolderNode tree.

        Raises:
            ValueError: If *display_name* is empty.
            ProviderUnavailable: If any listing fails; the whole walk aborts.
        """
        if not display_name:
            raise ValueError("display_name must be a non-empty string.")
        # Created per walk so it binds to the running event loop.
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None
        root = await self._walk(folder_id, display_name, semaphore)
        logger.info("Discovered folder tree %r (%s)", display_name, folder_id)
        return root

    async def _walk(
        self, folder_id: str, name: str, semaphore: asyncio.Semaphore | None
    ) -> FolderNode:
        folders, images = await asyncio.gather(
            _bounded(self.source.list_child_folders, folder_id, semaphore),
            _bounded(self.source.list_child_images, folder_id, semaphore),
        )
        logger.debug("Folder %r: %d sub-folders, %d images", name, len(folders), len(images))
        children = await asyncio.gather(
            *(self._walk(child.id, child.name or child.id, semaphore) for child in folders)
        )
        return FolderNode(
            id=folder_id,
            name=name,
            children=list(children),
            asset_ids=[image.id for image in images],
        )


async def _bounded(
    call: _Lister, folder_id: str, semaphore: asyncio.Semaphore | None
) -> list[DriveEntry]:
    if semaphore is None:
        return await call(folder_id)
    async with semaphore:
        return await call(folder_id)
