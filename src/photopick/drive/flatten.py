"""Flatten a FolderNode tree into ordered asset groups."""

from __future__ import annotations

from photopick.drive.models import AssetGroup, FolderNode


def flatten(root: FolderNode, parent_path: str = "") -> list[AssetGroup]:
    """Return one AssetGroup per folder that directly holds assets.

    Depth-first pre-order: a folder's own group comes before its children's,
    children in the order discovery returned them. Folders with no direct
    assets emit nothing themselves but still contribute their descendants.
    Pure and deterministic.

    Args:
        root: Tree produced by TreeWalker.discover().
        parent_path: Optional prefix joined in front of the root's name.
    """
    groups: list[AssetGroup] = []
    _collect(root, parent_path, groups)
    return groups


def _collect(node: FolderNode, parent_path: str, out: list[AssetGroup]) -> None:
    path = f"{parent_path}/{node.name}" if parent_path else node.name
    if node.asset_ids:
        out.append(
            AssetGroup(path=path, source_folder_id=node.id, asset_ids=tuple(node.asset_ids))
        )
    for child in node.children:
        _collect(child, path, out)
