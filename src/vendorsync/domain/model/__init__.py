"""Domain model for vendor catalog synchronisation."""

from __future__ import annotations

from .audit import VendorSyncRun, VendorSyncRunDiff, VendorSyncState
from .base import Entity, new_id
from .catalog import Product, StoreStock, VendorCatalogItem
from .enums import DiffStatus, ProductCategory, RunDisplayStatus, SyncRunStatus

__all__ = [
    "DiffStatus",
    "Entity",
    "Product",
    "ProductCategory",
    "RunDisplayStatus",
    "StoreStock",
    "SyncRunStatus",
    "VendorCatalogItem",
    "VendorSyncRun",
    "VendorSyncRunDiff",
    "VendorSyncState",
    "new_id",
]
