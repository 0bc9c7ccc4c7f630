"""Ports for persisting catalog entities and sync audit records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from vendorsync.domain.model import (
    Product,
    StoreStock,
    VendorCatalogItem,
    VendorSyncRun,
    VendorSyncRunDiff,
    VendorSyncState,
)

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ProductRepository(Repository[Product], Protocol):
    def get(self, product_id: str) -> Product | None: ...

    def list_for_vendor(self, vendor: str) -> Sequence[Product]:
        """Products whose SKU carries the ``"<vendor>:"`` prefix, with stocks loaded."""
        ...


@runtime_checkable
class CatalogItemRepository(Repository[VendorCatalogItem], Protocol):
    def get(self, item_id: str) -> VendorCatalogItem | None: ...

    def list_for_vendor(self, vendor: str) -> Sequence[VendorCatalogItem]: ...


@runtime_checkable
class StoreStockRepository(Repository[StoreStock], Protocol):
    def get(self, stock_id: str) -> StoreStock | None: ...


@runtime_checkable
class SyncRunRepository(Repository[VendorSyncRun], Protocol):
    def get(self, run_id: str) -> VendorSyncRun | None: ...

    def list_for_vendor(
        self, vendor: str | None, *, limit: int, offset: int = 0
    ) -> Sequence[VendorSyncRun]:
        """Newest first; ``vendor=None`` lists every vendor."""
        ...

    def count_for_vendor(self, vendor: str | None) -> int: ...


@runtime_checkable
class SyncRunDiffRepository(Repository[VendorSyncRunDiff], Protocol):
    def get_by_run_id(self, run_id: str) -> VendorSyncRunDiff | None: ...


@runtime_checkable
class SyncStateRepository(Repository[VendorSyncState], Protocol):
    def get(self, vendor: str) -> VendorSyncState | None: ...

    def list_all(self) -> Sequence[VendorSyncState]: ...
