"""Domain models for the photopick catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Classification(Enum):
    SELECTED = "selected"
    LATER = "later"

    @classmethod
    def from_db(cls, value: str | None) -> Classification | None:
        return cls(value) if value else None


@dataclass
class CatalogRecord:
    """One discovered photo. ``id`` is the provider's stable asset id."""

    id: str
    owner_id: str
    name: str
    path: str
    source_folder_id: str
    display_locator: str
    thumbnail_locator: str
    discovered_at: str
    classification: Classification | None = None


@dataclass
class UserProfile:
    id: str
    name: str
    email: str = ""
    contact: str = ""
    role: str = "user"  # admin | user
    drive_folder_id: str = ""
    selection_limit: int = 150
    is_finalized: bool = False
    created_at: str | None = None


@dataclass
class ResumeState:
    """Last navigation position for a user. Advisory only."""

    owner_id: str
    last_index: int
    updated_at: str
    last_asset_id: str | None = None
    last_folder: str | None = None


@dataclass
class ActivityEntry:
    user_id: str
    action: str
    details: str
    timestamp: str
    id: int | None = None  # set after insert
