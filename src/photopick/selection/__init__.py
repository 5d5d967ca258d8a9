"""Client-side selection: classification rules, gallery service, resume cursor."""

from photopick.selection.machine import Decision, RejectReason, classify
from photopick.selection.resume import ResumeCursor
from photopick.selection.service import GallerySnapshot, SelectionEvent, SelectionService

__all__ = [
    "Decision",
    "GallerySnapshot",
    "RejectReason",
    "ResumeCursor",
    "SelectionEvent",
    "SelectionService",
    "classify",
]
