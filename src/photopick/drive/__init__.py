"""Drive folder discovery: provider client, tree walker, flattener."""

from photopick.drive.client import DriveClient, display_locator, thumbnail_locator
from photopick.drive.flatten import flatten
from photopick.drive.models import AssetGroup, DriveEntry, FolderNode
from photopick.drive.walker import TreeWalker

__all__ = [
    "AssetGroup",
    "DriveClient",
    "DriveEntry",
    "FolderNode",
    "TreeWalker",
    "display_locator",
    "flatten",
    "thumbnail_locator",
]
