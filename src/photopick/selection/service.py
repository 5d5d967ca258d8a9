"""Session-level selection operations for one client gallery.

The selected count used for the cap is read from the catalog at the moment
of each attempt. Two sessions for the same user can both pass the check
before either commits and end up one over the cap; there is no server-side
counter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from photopick.db.models import CatalogRecord, Classification
from photopick.db.repository import Repository
from photopick.errors import AssetNotFound, NothingSelected, UserNotFound
from photopick.selection.machine import Decision, RejectReason, classify

logger = logging.getLogger("photopick.selection")

DEFAULT_SELECTION_LIMIT = 150
FINALIZE_ACTION = "Selection Finalized"


@dataclass(frozen=True)
class SelectionEvent:
    owner_id: str
    asset_id: str
    classification: Classification
    message: str


@dataclass
class GallerySnapshot:
    """An owner's catalog subset plus the running selection count."""

    owner_id: str
    records: list[CatalogRecord] = field(default_factory=list)
    selected_count: int = 0
    selection_limit: int = DEFAULT_SELECTION_LIMIT

    @property
    def later_count(self) -> int:
        return sum(1 for r in self.records if r.classification is Classification.LATER)

    @property
    def at_limit(self) -> bool:
        return self.selected_count >= self.selection_limit


class SelectionService:
    """Apply client classification actions to the catalog.

    Args:
        repo: Catalog repository.
        read_only: Preview mode (an admin viewing as the user). Every
            classification is rejected with READ_ONLY and nothing is written.
        default_limit: Cap used when the owner has no profile.
    """

    def __init__(
        self,
        repo: Repository,
        *,
        read_only: bool = False,
        default_limit: int = DEFAULT_SELECTION_LIMIT,
    ) -> None:
        self.repo = repo
        self.read_only = read_only
        self.default_limit = default_limit
        self._listeners: list[Callable[[SelectionEvent], None]] = []

    def subscribe(self, listener: Callable[[SelectionEvent], None]) -> None:
        """Register *listener* to be called after every accepted classification."""
        self._listeners.append(listener)

    def selection_limit(self, owner_id: str) -> int:
        user = self.repo.get_user(owner_id)
        return user.selection_limit if user is not None else self.default_limit

    def gallery(self, owner_id: str) -> GallerySnapshot:
        """Return *owner_id*'s photos with the current selected count and cap."""
        records = self.repo.list_photos(owner_id)
        selected = sum(1 for r in records if r.classification is Classification.SELECTED)
        return GallerySnapshot(
            owner_id=owner_id,
            records=records,
            selected_count=selected,
            selection_limit=self.selection_limit(owner_id),
        )

    def classify(self, owner_id: str, asset_id: str, target: Classification) -> Decision:
        """Move *asset_id* to *target* on behalf of *owner_id*.

        Only the ``classification`` column is written, and only on acceptance.
        Listeners are notified after the write; rejections notify nobody.

        Raises:
            AssetNotFound: If the asset is missing or owned by someone else.
        """
        record = self.repo.get_photo(asset_id)
        if record is None or record.owner_id != owner_id:
            raise AssetNotFound(f"Photo '{asset_id}' not found for user '{owner_id}'.")

        if self.read_only:
            return Decision.rejected(target, RejectReason.READ_ONLY)

        limit = self.selection_limit(owner_id)
        decision = classify(
            record.classification, target, self.repo.count_selected(owner_id), limit
        )
        if not decision.accepted:
            logger.info("Rejected %s for %s: %s", target.value, asset_id, decision.reason.value)
            return decision

        if decision.changed:
            self.repo.set_classification(asset_id, target)
        self._notify(SelectionEvent(owner_id, asset_id, target, decision.message))
        return decision

    def finalize(self, owner_id: str) -> int:
        """Mark *owner_id*'s selection as final and return the selected count.

        Raises:
            UserNotFound: If the user has no profile.
            NothingSelected: If no photo is selected yet.
        """
        user = self.repo.get_user(owner_id)
        if user is None:
            raise UserNotFound(f"No user with id '{owner_id}'.")
        count = self.repo.count_selected(owner_id)
        if count == 0:
            raise NothingSelected("Please select at least one photo")

        self.repo.set_finalized(owner_id)
        self.repo.log_activity(
            owner_id,
            FINALIZE_ACTION,
            f"User {user.name or user.email} finalized their photo selection with {count} photos",
        )
        return count

    def _notify(self, event: SelectionEvent) -> None:
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                logger.exception("Selection listener failed for %s", event.asset_id)
