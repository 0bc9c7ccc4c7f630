"""Apply engine: execute a diff against storage and keep the audit trail.

One call to ``execute_apply`` is one sync run. The run row is written before
any catalog write and finalized afterwards, so callers always find a durable
record, including for dry runs and for no-op runs.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from vendorsync.domain.errors import RecordNotFoundError, TransactionDroppedError
from vendorsync.domain.model import (
    Product,
    VendorCatalogItem,
    VendorSyncRun,
    VendorSyncRunDiff,
    VendorSyncState,
)

from .diff import DiffResult, compute_diff
from .summary import DEFAULT_DIFF_SAMPLE_LIMIT, SyncSummary, build_diff_aggregates

if TYPE_CHECKING:
    from vendorsync.domain.normalized import NormalizedProduct
    from vendorsync.domain.ports.unit_of_work import CatalogSyncUnitOfWork

type UnitOfWorkFactory = Callable[[], CatalogSyncUnitOfWork]

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class TransactionPolicy:
    """How hard to try the atomic write path before degrading.

    ``max_attempts`` counts transactional attempts; only a dropped transaction
    triggers another one. After the last drop the writes are replayed with a
    commit per write when ``fallback_without_transaction`` is set.
    """

    max_attempts: int = 1
    backoff_seconds: float = 0.0
    fallback_without_transaction: bool = True


class WriteMode(StrEnum):
    TRANSACTIONAL = "transactional"
    PER_WRITE = "per_write"


@dataclass(slots=True, kw_only=True)
class ApplyContext:
    unit_of_work_factory: UnitOfWorkFactory
    vendor: str
    actor: str
    normalized: Sequence[NormalizedProduct]
    existing_catalog_items: Sequence[VendorCatalogItem] = ()
    existing_products: Sequence[Product] = ()
    source_path: str | None = None
    dry_run: bool = False
    transaction_policy: TransactionPolicy = field(default_factory=TransactionPolicy)
    diff_sample_limit: int = DEFAULT_DIFF_SAMPLE_LIMIT
    clock: Callable[[], datetime] = _utcnow
    sleep: Callable[[float], None] = time.sleep


@dataclass(slots=True)
class ApplyEngineResult:
    run_id: str
    diff: DiffResult
    summary: SyncSummary


def _require[T](record: T | None, entity: str, record_id: str) -> T:
    if record is None:
        raise RecordNotFoundError(entity, record_id)
    return record


def _write_diff(
    uow: CatalogSyncUnitOfWork,
    diff: DiffResult,
    *,
    vendor: str,
    commit_each: bool,
) -> None:
    repositories = uow.repositories

    def written() -> None:
        if commit_each:
            uow.commit()

    for item in diff.items:
        product_data = item.product_after.product_data()
        if item.product_before is None:
            repositories.products.add(Product(**product_data))
            written()
        elif item.product_changes:
            product_id = item.product_before.id
            if product_id is None:
                raise RecordNotFoundError("Product", item.product_before.sku)
            product = _require(repositories.products.get(product_id), "Product", product_id)
            for name, value in product_data.items():
                setattr(product, name, value)
            written()

        if item.catalog_item_id is None:
            repositories.catalog_items.add(
                VendorCatalogItem(
                    vendor=vendor,
                    catalog_id=item.catalog_id,
                    payload=dict(item.normalized),
                    hash=item.hash,
                )
            )
            written()
        elif item.existing_hash != item.hash:
            catalog_item = _require(
                repositories.catalog_items.get(item.catalog_item_id),
                "VendorCatalogItem",
                item.catalog_item_id,
            )
            catalog_item.payload = dict(item.normalized)
            catalog_item.hash = item.hash
            written()

        for change in item.stock_changes:
            if not change.changed:
                continue
            stock = _require(
                repositories.store_stocks.get(change.store_stock_id),
                "StoreStock",
                change.store_stock_id,
            )
            stock.qty = change.after.qty
            stock.barcode = change.after.barcode
            written()

    for removed in diff.removed:
        for removed_stock in removed.stocks:
            stock = _require(
                repositories.store_stocks.get(removed_stock.store_stock_id),
                "StoreStock",
                removed_stock.store_stock_id,
            )
            stock.qty = 0
            written()


def apply_writes(
    diff: DiffResult,
    *,
    vendor: str,
    unit_of_work_factory: UnitOfWorkFactory,
    policy: TransactionPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> WriteMode:
    """Write ``diff`` inside one transaction, degrading to per-write commits on a drop.

    The per-write path replays the identical sequence and is not atomic: a
    failure half-way leaves the earlier writes committed.
    """

    policy = policy or TransactionPolicy()
    attempts = max(policy.max_attempts, 1)
    dropped: TransactionDroppedError | None = None

    for attempt in range(1, attempts + 1):
        try:
            with unit_of_work_factory() as uow:
                _write_diff(uow, diff, vendor=vendor, commit_each=False)
                uow.commit()
        except TransactionDroppedError as exc:
            dropped = exc
            log.warning(
                "Transaction dropped for vendor %s (attempt %s/%s): %s",
                vendor,
                attempt,
                attempts,
                exc,
            )
            if attempt < attempts and policy.backoff_seconds > 0:
                sleep(policy.backoff_seconds * 2 ** (attempt - 1))
            continue
        return WriteMode.TRANSACTIONAL

    if dropped is None:
        raise RuntimeError("Transactional write loop ended without an outcome")
    if not policy.fallback_without_transaction:
        raise dropped

    log.warning("Falling back to non-transactional writes for vendor %s", vendor)
    with unit_of_work_factory() as uow:
        _write_diff(uow, diff, vendor=vendor, commit_each=True)
    return WriteMode.PER_WRITE


def _create_run(context: ApplyContext, diff: DiffResult, started_at: datetime) -> str:
    counts = diff.counts
    run = VendorSyncRun(
        vendor=context.vendor,
        actor=context.actor,
        started_at=started_at,
        dry_run=context.dry_run,
        source_path=context.source_path,
        hash=diff.hash,
        total_items=counts.total,
        created_count=counts.created or None,
        updated_count=counts.updated or None,
        unchanged_count=counts.unchanged or None,
        removed_count=counts.removed or None,
    )
    with context.unit_of_work_factory() as uow:
        uow.repositories.sync_runs.add(run)
        uow.commit()
    return run.id


def _finalize_run(
    context: ApplyContext,
    diff: DiffResult,
    *,
    run_id: str,
    error: Exception | None,
    finished_at: datetime,
    duration_ms: int,
) -> None:
    aggregates = build_diff_aggregates(diff, limit=context.diff_sample_limit)
    with context.unit_of_work_factory() as uow:
        repositories = uow.repositories

        run_diff = repositories.sync_run_diffs.get_by_run_id(run_id)
        if run_diff is None:
            repositories.sync_run_diffs.add(VendorSyncRunDiff(run_id=run_id, aggregates=aggregates))
        else:
            run_diff.aggregates = aggregates

        run = _require(repositories.sync_runs.get(run_id), "VendorSyncRun", run_id)
        if error is not None:
            run.mark_failed(str(error), finished_at=finished_at, duration_ms=duration_ms)
        else:
            run.mark_succeeded(finished_at=finished_at, duration_ms=duration_ms)

        if error is None and not context.dry_run:
            state = repositories.sync_states.get(context.vendor)
            if state is None:
                state = VendorSyncState(vendor=context.vendor)
                repositories.sync_states.add(state)
            state.total_items = diff.counts.total
            state.last_hash = diff.hash
            state.last_source = context.source_path
            state.last_run_at = finished_at
            state.last_run_by = context.actor
            state.last_duration_ms = duration_ms
            state.last_error = None

        uow.commit()


def execute_apply(context: ApplyContext) -> ApplyEngineResult:
    """Diff, record, write and finalize one sync run.

    Write failures are recorded on the run as ``Failed`` and then re-raised.
    Diff failures propagate before any run exists.
    """

    diff = compute_diff(
        context.vendor,
        context.normalized,
        context.existing_catalog_items,
        context.existing_products,
    )
    started_at = context.clock()
    run_id = _create_run(context, diff, started_at)
    log.info(
        "Started sync run %s for vendor %s: total=%s created=%s updated=%s unchanged=%s "
        "removed=%s dry_run=%s",
        run_id,
        context.vendor,
        diff.counts.total,
        diff.counts.created,
        diff.counts.updated,
        diff.counts.unchanged,
        diff.counts.removed,
        context.dry_run,
    )

    apply_error: Exception | None = None
    if not context.dry_run:
        try:
            mode = apply_writes(
                diff,
                vendor=context.vendor,
                unit_of_work_factory=context.unit_of_work_factory,
                policy=context.transaction_policy,
                sleep=context.sleep,
            )
            log.debug("Applied sync run %s writes (%s)", run_id, mode)
        except Exception as exc:  # noqa: BLE001
            apply_error = exc

    finished_at = context.clock()
    duration_ms = max(int((finished_at - started_at).total_seconds() * 1000), 0)

    _finalize_run(
        context,
        diff,
        run_id=run_id,
        error=apply_error,
        finished_at=finished_at,
        duration_ms=duration_ms,
    )

    if apply_error is not None:
        log.error("Sync run %s for vendor %s failed: %s", run_id, context.vendor, apply_error)
        raise apply_error

    log.info("Finished sync run %s for vendor %s in %sms", run_id, context.vendor, duration_ms)

    counts = diff.counts
    return ApplyEngineResult(
        run_id=run_id,
        diff=diff,
        summary=SyncSummary(
            vendor=context.vendor,
            hash=diff.hash,
            total=counts.total,
            created=counts.created,
            updated=counts.updated,
            unchanged=counts.unchanged,
            removed=counts.removed,
            dry_run=context.dry_run,
            duration_ms=duration_ms,
            finished_at=finished_at.isoformat(),
            source_path=context.source_path,
        ),
    )
