"""Audit records for sync runs and per-vendor rolling state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from vendorsync.domain.model.base import Entity
from vendorsync.domain.model.enums import SyncRunStatus

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class VendorSyncRun(Entity):
    """One execution of the apply engine.

    Created ``Pending`` and finalized exactly once. A run whose process died in
    between keeps ``Pending`` forever.
    """

    vendor: str
    actor: str
    started_at: datetime
    status: SyncRunStatus = SyncRunStatus.PENDING
    dry_run: bool = False
    source_path: str | None = None
    hash: str = ""

    total_items: int = 0
    created_count: int | None = None
    updated_count: int | None = None
    unchanged_count: int | None = None
    removed_count: int | None = None

    finished_at: datetime | None = None
    duration_ms: int | None = None
    error: str | None = None

    def mark_succeeded(self, *, finished_at: datetime, duration_ms: int) -> None:
        self.status = SyncRunStatus.SUCCESS
        self.error = None
        self.finished_at = finished_at
        self.duration_ms = duration_ms

    def mark_failed(self, message: str, *, finished_at: datetime, duration_ms: int) -> None:
        self.status = SyncRunStatus.FAILED
        self.error = message
        self.finished_at = finished_at
        self.duration_ms = duration_ms


@dataclass(eq=False, kw_only=True)
class VendorSyncRunDiff(Entity):
    """Capped diff aggregate stored 1:1 with a run."""

    run_id: str
    aggregates: dict[str, Any] = field(default_factory=dict[str, Any], repr=False)


@dataclass(eq=False, kw_only=True)
class VendorSyncState:
    """Rolling per-vendor state, updated after successful real runs only."""

    vendor: str
    total_items: int = 0
    last_hash: str | None = None
    last_source: str | None = None
    last_run_at: datetime | None = None
    last_run_by: str | None = None
    last_duration_ms: int | None = None
    last_error: str | None = None
