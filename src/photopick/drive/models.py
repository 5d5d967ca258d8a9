"""Transient discovery models. Built per sync run and never persisted."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DriveEntry:
    """One row of a folder-children listing."""

    id: str
    name: str = ""
    mime_type: str = ""


@dataclass
class FolderNode:
    """A provider folder with its direct image assets and sub-folders.

    ``asset_ids`` holds image entries only and ``children`` folders only.
    """

    id: str
    name: str
    children: list[FolderNode] = field(default_factory=list)
    asset_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AssetGroup:
    path: str
    source_folder_id: str
    asset_ids: tuple[str, ...]
