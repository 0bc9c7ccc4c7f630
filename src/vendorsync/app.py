"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from vendorsync.adapters.feed import load_catalog_feed
from vendorsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogSyncUnitOfWork,
    is_started,
    startup,
)
from vendorsync.common.locking import VendorLocks
from vendorsync.config import get_sync_config
from vendorsync.domain.sync import (
    ApplyContext,
    aggregate_hash,
    build_run_page,
    build_run_view,
    execute_apply,
    hash_normalized_product,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from vendorsync.config import FeedConfig, SyncConfig
    from vendorsync.domain.model import VendorSyncState
    from vendorsync.domain.normalized import NormalizedProduct
    from vendorsync.domain.sync import ApplyEngineResult, RunPage, RunView, UnitOfWorkFactory

INJECTED_SOURCE = "(injected)"

log = getLogger(__name__)

VENDOR_LOCKS = VendorLocks()


@dataclass(frozen=True, slots=True)
class SyncRunDetail:
    run: RunView
    aggregates: dict[str, Any] | None


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyCatalogSyncUnitOfWork


def sync_vendor_catalog(
    vendor: str,
    *,
    source_path: str | Path | None = None,
    records: Sequence[NormalizedProduct] | None = None,
    actor: str | None = None,
    dry_run: bool = False,
    blocking: bool = True,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    sync_config: SyncConfig | None = None,
    feed_config: FeedConfig | None = None,
    locks: VendorLocks | None = None,
) -> ApplyEngineResult:
    """Synchronise one vendor's feed into the stored catalog.

    ``records`` bypasses feed loading. Runs for the same vendor are serialized
    through ``locks``; with ``blocking=False`` a busy vendor raises
    ``VendorSyncInProgressError`` instead of waiting.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    config = sync_config or get_sync_config()
    vendor_locks = locks or VENDOR_LOCKS

    if records is None:
        feed = load_catalog_feed(vendor, explicit_path=source_path, config=feed_config)
        normalized = feed.records
        resolved_source: str | None = feed.source_path
    else:
        normalized = list(records)
        resolved_source = str(source_path) if source_path is not None else INJECTED_SOURCE

    with vendor_locks.hold(vendor, blocking=blocking):
        with effective_uow() as uow:
            existing_products = list(uow.repositories.products.list_for_vendor(vendor))
            existing_catalog_items = list(uow.repositories.catalog_items.list_for_vendor(vendor))

        log.info(
            "Syncing vendor %s: %s incoming, %s stored products, %s catalog items",
            vendor,
            len(normalized),
            len(existing_products),
            len(existing_catalog_items),
        )

        return execute_apply(
            ApplyContext(
                unit_of_work_factory=effective_uow,
                vendor=vendor,
                actor=actor or config.default_actor,
                normalized=normalized,
                existing_catalog_items=existing_catalog_items,
                existing_products=existing_products,
                source_path=resolved_source,
                dry_run=dry_run,
                transaction_policy=config.transaction_policy,
                diff_sample_limit=config.diff_sample_limit,
            )
        )


def feed_matches_last_sync(
    vendor: str,
    records: Sequence[NormalizedProduct],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> bool:
    """Whether ``records`` hash to the aggregate stored by the vendor's last successful run."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    current = aggregate_hash(
        (record["catalogId"], hash_normalized_product(record)) for record in records
    )
    with effective_uow() as uow:
        state = uow.repositories.sync_states.get(vendor)
    return state is not None and state.last_hash == current


def list_sync_runs(
    *,
    vendor: str | None = None,
    page: int = 1,
    page_size: int = 20,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> RunPage:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    page = max(page, 1)
    page_size = max(page_size, 1)
    with effective_uow() as uow:
        runs = uow.repositories.sync_runs.list_for_vendor(
            vendor, limit=page_size, offset=(page - 1) * page_size
        )
        total = uow.repositories.sync_runs.count_for_vendor(vendor)
    return build_run_page(runs, page=page, page_size=page_size, total_items=total)


def get_sync_run(
    run_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncRunDetail | None:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        run = uow.repositories.sync_runs.get(run_id)
        if run is None:
            return None
        run_diff = uow.repositories.sync_run_diffs.get_by_run_id(run_id)
        return SyncRunDetail(
            run=build_run_view(run),
            aggregates=run_diff.aggregates if run_diff is not None else None,
        )


def get_vendor_states(
    vendor: str | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[VendorSyncState]:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        if vendor is None:
            return list(uow.repositories.sync_states.list_all())
        state = uow.repositories.sync_states.get(vendor)
        return [state] if state is not None else []
