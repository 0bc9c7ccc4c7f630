"""Ports describing the storage collaborator."""

from __future__ import annotations

from .persistence import (
    CatalogItemRepository,
    ProductRepository,
    Repository,
    StoreStockRepository,
    SyncRunDiffRepository,
    SyncRunRepository,
    SyncStateRepository,
)
from .unit_of_work import CatalogSyncRepositories, CatalogSyncUnitOfWork, UnitOfWork

__all__ = [
    "CatalogItemRepository",
    "CatalogSyncRepositories",
    "CatalogSyncUnitOfWork",
    "ProductRepository",
    "Repository",
    "StoreStockRepository",
    "SyncRunDiffRepository",
    "SyncRunRepository",
    "SyncStateRepository",
    "UnitOfWork",
]
