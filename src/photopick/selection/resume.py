"""Per-user resume cursor: where the client was in their gallery.

Best-effort. Storage failures are logged and never reach the caller, and an
absent cursor is the normal first-session state.
"""

from __future__ import annotations

import logging
import sqlite3

from photopick.db.models import ResumeState
from photopick.db.repository import Repository, utc_now

logger = logging.getLogger("photopick.resume")


class ResumeCursor:
    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def save(
        self,
        owner_id: str,
        index: int | None = None,
        asset_id: str | None = None,
        folder: str | None = None,
    ) -> bool:
        """Merge the supplied fields into *owner_id*'s cursor.

        ``updated_at`` is always refreshed; omitted fields keep their stored
        values. Returns False (after logging) if the write failed.
        """
        if index is not None and index < 0:
            logger.warning("Ignoring negative resume index %d for %s", index, owner_id)
            index = None
        try:
            self.repo.merge_resume(
                owner_id,
                updated_at=utc_now(),
                last_index=index,
                last_asset_id=asset_id,
                last_folder=folder,
            )
        except sqlite3.Error as exc:
            logger.warning("Error saving selection state for %s: %s", owner_id, exc)
            return False
        return True

    def load(self, owner_id: str) -> ResumeState | None:
        """Return *owner_id*'s cursor, or None if none was ever saved."""
        try:
            return self.repo.get_resume(owner_id)
        except sqlite3.Error as exc:
            logger.warning("Error loading selection state for %s: %s", owner_id, exc)
            return None

    def resume_index(self, owner_id: str, total: int) -> int | None:
        """Return the saved index if it still points inside a gallery of *total* photos."""
        state = self.load(owner_id)
        if state is None or not 0 <= state.last_index < total:
            return None
        return state.last_index
