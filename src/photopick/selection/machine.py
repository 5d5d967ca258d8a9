"""Classification transitions for a single photo.

Allowed moves: unclassified → selected | later, selected ↔ later, and
selected → selected as a no-op. There is no clear action. Moving into
``selected`` is capped by the owner's selection limit; everything else is
always accepted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from photopick.db.models import Classification


class RejectReason(Enum):
    LIMIT_REACHED = "limit_reached"
    READ_ONLY = "read_only"


@dataclass(frozen=True)
class Decision:
    """Outcome of a classification attempt.

    A rejection is normal control flow, not an error. ``changed`` is False
    for accepted no-ops (re-selecting a selected photo).
    """

    accepted: bool
    target: Classification
    reason: RejectReason | None = None
    changed: bool = False
    limit: int | None = None

    @classmethod
    def ok(cls, target: Classification, changed: bool) -> Decision:
        return cls(accepted=True, target=target, changed=changed)

    @classmethod
    def rejected(
        cls, target: Classification, reason: RejectReason, limit: int | None = None
    ) -> Decision:
        return cls(accepted=False, target=target, reason=reason, limit=limit)

    @property
    def message(self) -> str:
        if self.reason is RejectReason.LIMIT_REACHED:
            return f"Selection limit reached — You can only select up to {self.limit} photos."
        if self.reason is RejectReason.READ_ONLY:
            return "Gallery is in read-only mode"
        if self.target is Classification.SELECTED:
            return "Added to favorites!"
        return "Saved for later!"


def classify(
    current: Classification | None,
    target: Classification,
    selected_count: int,
    limit: int,
) -> Decision:
    """Decide whether *current* may move to *target*.

    Args:
        current: The photo's classification right now (None = unclassified).
        target: Requested classification.
        selected_count: Owner's selected photos in the snapshot used for this
            attempt.
        limit: Owner's selection cap.

    Returns:
        Decision; rejected with LIMIT_REACHED when a new selection would
        exceed the cap.
    """
    if not isinstance(target, Classification):
        raise TypeError(f"target must be a Classification, got {target!r}")

    if target is Classification.SELECTED and current is not Classification.SELECTED:
        if selected_count >= limit:
            return Decision.rejected(target, RejectReason.LIMIT_REACHED, limit=limit)

    return Decision.ok(target, changed=current is not target)
