from __future__ import annotations

from datetime import UTC, datetime, timedelta

from tests.helpers.catalog import CatalogStore, make_record, make_variant, seed_catalog
from vendorsync.domain.model import RunDisplayStatus, SyncRunStatus, VendorSyncRun
from vendorsync.domain.sync import (
    build_diff_aggregates,
    build_run_page,
    build_run_view,
    compute_diff,
)

STARTED = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _run(status: SyncRunStatus = SyncRunStatus.PENDING, **overrides: object) -> VendorSyncRun:
    run = VendorSyncRun(vendor="acme", actor="tester", started_at=STARTED, status=status)
    for name, value in overrides.items():
        setattr(run, name, value)
    return run


def test_aggregates_keep_only_changed_stocks() -> None:
    store = CatalogStore()
    seed_catalog(store, "acme", [make_record("A1"), make_record("B2")], store_ids=("s1", "s2"))
    records = [
        make_record("A1", variants=[make_variant("v1"), make_variant("v2")]),
        make_record("B2"),
    ]

    diff = compute_diff(
        "acme", records, list(store.catalog_items.values()), list(store.products.values())
    )
    aggregates = build_diff_aggregates(diff)

    assert aggregates["counts"] == {
        "total": 2,
        "created": 0,
        "updated": 1,
        "unchanged": 1,
        "removed": 0,
    }
    first, second = aggregates["items"]
    assert first["catalog_id"] == "A1"
    assert first["status"] == "updated"
    assert first["stock_changes"] == [
        {"store_id": "s1", "before": {"qty": 1, "barcode": None}, "after": {"qty": 2, "barcode": None}},
        {"store_id": "s2", "before": {"qty": 1, "barcode": None}, "after": {"qty": 2, "barcode": None}},
    ]
    assert second["status"] == "unchanged"
    assert second["stock_changes"] == []


def test_aggregates_list_field_changes_and_removals() -> None:
    store = CatalogStore()
    seeded = seed_catalog(store, "acme", [make_record("A1", name="Old"), make_record("B2")])

    diff = compute_diff(
        "acme",
        [make_record("A1", name="New")],
        list(store.catalog_items.values()),
        list(store.products.values()),
    )
    aggregates = build_diff_aggregates(diff, limit=1)

    assert aggregates["items"][0]["product_changes"] == [
        {"field": "name", "before": "Old", "after": "New"}
    ]
    assert aggregates["removed"] == [{"catalog_id": "B2", "product_id": seeded["B2"].id}]


def test_aggregates_with_zero_limit_keep_counts() -> None:
    diff = compute_diff("acme", [make_record("A1")], [], [])

    aggregates = build_diff_aggregates(diff, limit=0)

    assert aggregates["items"] == []
    assert aggregates["counts"]["created"] == 1


def test_run_view_maps_status_and_blank_hash() -> None:
    assert build_run_view(_run()).status is RunDisplayStatus.RUNNING
    assert build_run_view(_run(SyncRunStatus.SUCCESS)).status is RunDisplayStatus.SUCCESS

    failed = build_run_view(_run(SyncRunStatus.FAILED, error="boom", hash=""))
    assert failed.status is RunDisplayStatus.ERROR
    assert failed.error == "boom"
    assert failed.hash is None


def test_run_view_copies_counts_and_timing() -> None:
    finished = STARTED + timedelta(seconds=3)
    run = _run(SyncRunStatus.SUCCESS, hash="abc", total_items=4, created_count=1)
    run.mark_succeeded(finished_at=finished, duration_ms=3000)

    view = build_run_view(run)

    assert view.hash == "abc"
    assert view.completed_at == finished
    assert view.duration_ms == 3000
    assert view.counts.total == 4
    assert view.counts.created == 1
    assert view.counts.updated is None


def test_run_page_reports_has_more() -> None:
    runs = [_run() for _ in range(2)]

    page = build_run_page(runs, page=1, page_size=2, total_items=5)
    last = build_run_page(runs[:1], page=3, page_size=2, total_items=5)

    assert page.has_more is True
    assert len(page.items) == 2
    assert last.has_more is False


def test_run_page_clamps_inputs() -> None:
    page = build_run_page([], page=0, page_size=0, total_items=-3)

    assert page.page == 1
    assert page.page_size == 1
    assert page.total_items == 0
    assert page.has_more is False
    assert page.items == ()
