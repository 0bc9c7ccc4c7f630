"""SQLAlchemy adapter package for vendorsync."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyCatalogItemRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyStoreStockRepository,
    SqlAlchemySyncRunDiffRepository,
    SqlAlchemySyncRunRepository,
    SqlAlchemySyncStateRepository,
)
from .unit_of_work import SqlAlchemyCatalogSyncUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyCatalogItemRepository",
    "SqlAlchemyCatalogSyncUnitOfWork",
    "SqlAlchemyProductRepository",
    "SqlAlchemyStoreStockRepository",
    "SqlAlchemySyncRunDiffRepository",
    "SqlAlchemySyncRunRepository",
    "SqlAlchemySyncStateRepository",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
