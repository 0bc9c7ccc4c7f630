"""Reporting shapes derived from diffs and stored sync runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from vendorsync.domain.model import RunDisplayStatus, SyncRunStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from vendorsync.domain.model import VendorSyncRun

    from .diff import DiffResult

DEFAULT_DIFF_SAMPLE_LIMIT: Final[int] = 50

_DISPLAY_STATUS: Final[dict[SyncRunStatus, RunDisplayStatus]] = {
    SyncRunStatus.PENDING: RunDisplayStatus.RUNNING,
    SyncRunStatus.SUCCESS: RunDisplayStatus.SUCCESS,
    SyncRunStatus.FAILED: RunDisplayStatus.ERROR,
}


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncSummary:
    """What a caller gets back from one apply, for reporting."""

    vendor: str
    hash: str
    total: int
    created: int
    updated: int
    unchanged: int
    removed: int
    dry_run: bool
    duration_ms: int
    finished_at: str
    source_path: str | None


def build_diff_aggregates(
    diff: DiffResult, *, limit: int = DEFAULT_DIFF_SAMPLE_LIMIT
) -> dict[str, Any]:
    """JSON-ready inspection payload: the first ``limit`` items plus every removal.

    Only stock changes that actually change something are kept.
    """

    items = [
        {
            "catalog_id": item.catalog_id,
            "status": str(item.status),
            "product_changes": [
                {"field": change.field, "before": change.before, "after": change.after}
                for change in item.product_changes
            ],
            "stock_changes": [
                {
                    "store_id": change.store_id,
                    "before": {"qty": change.before.qty, "barcode": change.before.barcode},
                    "after": {"qty": change.after.qty, "barcode": change.after.barcode},
                }
                for change in item.stock_changes
                if change.changed
            ],
        }
        for item in diff.items[:limit]
    ]
    return {
        "counts": {
            "total": diff.counts.total,
            "created": diff.counts.created,
            "updated": diff.counts.updated,
            "unchanged": diff.counts.unchanged,
            "removed": diff.counts.removed,
        },
        "hash": diff.hash,
        "items": items,
        "removed": [
            {"catalog_id": entry.catalog_id, "product_id": entry.product_id}
            for entry in diff.removed
        ],
    }


@dataclass(frozen=True, slots=True, kw_only=True)
class RunCounts:
    total: int | None
    created: int | None
    updated: int | None
    unchanged: int | None
    removed: int | None


@dataclass(frozen=True, slots=True, kw_only=True)
class RunView:
    id: str
    vendor: str
    status: RunDisplayStatus
    actor: str | None
    dry_run: bool
    source_path: str | None
    started_at: datetime
    completed_at: datetime | None
    counts: RunCounts
    hash: str | None
    error: str | None
    duration_ms: int | None


@dataclass(frozen=True, slots=True, kw_only=True)
class RunPage:
    page: int
    page_size: int
    total_items: int
    has_more: bool
    items: tuple[RunView, ...]


def display_status(status: SyncRunStatus) -> RunDisplayStatus:
    return _DISPLAY_STATUS[status]


def build_run_view(run: VendorSyncRun) -> RunView:
    return RunView(
        id=run.id,
        vendor=run.vendor,
        status=display_status(run.status),
        actor=run.actor,
        dry_run=run.dry_run,
        source_path=run.source_path,
        started_at=run.started_at,
        completed_at=run.finished_at,
        counts=RunCounts(
            total=run.total_items,
            created=run.created_count,
            updated=run.updated_count,
            unchanged=run.unchanged_count,
            removed=run.removed_count,
        ),
        hash=run.hash or None,
        error=run.error,
        duration_ms=run.duration_ms,
    )


def build_run_page(
    runs: Sequence[VendorSyncRun],
    *,
    page: int,
    page_size: int,
    total_items: int,
) -> RunPage:
    page = max(page, 1)
    page_size = max(page_size, 1)
    total_items = max(total_items, 0)
    return RunPage(
        page=page,
        page_size=page_size,
        total_items=total_items,
        has_more=total_items > page * page_size,
        items=tuple(build_run_view(run) for run in runs),
    )
