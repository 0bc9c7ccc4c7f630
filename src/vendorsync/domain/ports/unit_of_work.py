"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from vendorsync.domain.ports.persistence import (
        CatalogItemRepository,
        ProductRepository,
        StoreStockRepository,
        SyncRunDiffRepository,
        SyncRunRepository,
        SyncStateRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    One unit of work is one interactive transaction. Implementations raise
    ``TransactionDroppedError`` when the underlying transaction is lost.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CatalogSyncRepositories(RepositoryCollection):
    """Repositories required to diff, apply and audit a vendor sync."""

    products: ProductRepository
    catalog_items: CatalogItemRepository
    store_stocks: StoreStockRepository
    sync_runs: SyncRunRepository
    sync_run_diffs: SyncRunDiffRepository
    sync_states: SyncStateRepository


type CatalogSyncUnitOfWork = UnitOfWork[CatalogSyncRepositories]
