"""Exception types raised by the sync and selection layers."""

from __future__ import annotations


class PhotopickError(Exception):
    """Base class for all photopick errors."""


class ProviderUnavailable(PhotopickError):
    """Network or provider failure during discovery. Aborts the whole walk."""


class SyncConfigError(PhotopickError):
    """A sync was requested without enough information to run it."""


class UserNotFound(PhotopickError):
    """No profile exists for the requested user id."""


class AssetNotFound(PhotopickError):
    """The asset is not in the catalog, or belongs to another user."""


class NothingSelected(PhotopickError):
    """Finalization was attempted with zero selected photos."""
