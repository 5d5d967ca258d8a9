"""Catalog reconciliation against freshly discovered Drive folders."""

from photopick.sync.reconciler import CatalogReconciler, SyncResult

__all__ = ["CatalogReconciler", "SyncResult"]
