from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from vendorsync.app import SyncRunDetail
from vendorsync.domain.errors import FeedError
from vendorsync.domain.model import RunDisplayStatus, VendorSyncState
from vendorsync.domain.sync import (
    ApplyEngineResult,
    DiffCounts,
    DiffResult,
    RunPage,
    SyncSummary,
)
from vendorsync.domain.sync.summary import RunCounts, RunView
from vendorsync.ui import cli as cli_module

FINISHED = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _result() -> ApplyEngineResult:
    return ApplyEngineResult(
        run_id="run-1",
        diff=DiffResult(vendor="acme", hash="h", counts=DiffCounts(total=1), items=[], removed=[]),
        summary=SyncSummary(
            vendor="acme",
            hash="h",
            total=1,
            created=1,
            updated=0,
            unchanged=0,
            removed=0,
            dry_run=True,
            duration_ms=12,
            finished_at=FINISHED.isoformat(),
            source_path="/feeds/acme.json",
        ),
    )


def _view() -> RunView:
    return RunView(
        id="run-1",
        vendor="acme",
        status=RunDisplayStatus.SUCCESS,
        actor="svc",
        dry_run=False,
        source_path=None,
        started_at=FINISHED,
        completed_at=FINISHED,
        counts=RunCounts(total=1, created=1, updated=None, unchanged=None, removed=None),
        hash="h",
        error=None,
        duration_ms=5,
    )


def test_sync_command_passes_flags(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_sync(vendor: str, **kwargs: object) -> ApplyEngineResult:
        captured["vendor"] = vendor
        captured.update(kwargs)
        return _result()

    monkeypatch.setattr(cli_module, "sync_vendor_catalog", fake_sync)

    cli_module.main(
        ["sync", "acme", "--source", "/feeds/acme.json", "--dry-run", "--actor", "alice"]
    )

    assert captured == {
        "vendor": "acme",
        "source_path": "/feeds/acme.json",
        "actor": "alice",
        "dry_run": True,
        "blocking": True,
    }
    output = json.loads(capsys.readouterr().out)
    assert output["run_id"] == "run-1"
    assert output["summary"]["created"] == 1


def test_sync_command_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(vendor: str, **kwargs: object) -> ApplyEngineResult:
        captured.update(kwargs)
        return _result()

    monkeypatch.setattr(cli_module, "sync_vendor_catalog", fake_sync)

    cli_module.main(["sync", "acme", "--no-wait"])

    assert captured["source_path"] is None
    assert captured["actor"] is None
    assert captured["dry_run"] is False
    assert captured["blocking"] is False


def test_sync_failure_exits_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_sync(*_: object, **__: object) -> ApplyEngineResult:
        raise FeedError("Unable to read acme catalog from paths /nowhere")

    monkeypatch.setattr(cli_module, "sync_vendor_catalog", failing_sync)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync", "acme"])

    assert excinfo.value.code == 1


def test_invalid_page_exits_with_two() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["runs", "--page", "0"])

    assert excinfo.value.code == 2


def test_missing_command_exits_with_two() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2


def test_runs_command_prints_page(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_list(**kwargs: object) -> RunPage:
        captured.update(kwargs)
        return RunPage(page=2, page_size=5, total_items=6, has_more=False, items=(_view(),))

    monkeypatch.setattr(cli_module, "list_sync_runs", fake_list)

    cli_module.main(["runs", "--vendor", "acme", "--page", "2", "--page-size", "5"])

    assert captured == {"vendor": "acme", "page": 2, "page_size": 5}
    output = json.loads(capsys.readouterr().out)
    assert output["total_items"] == 6
    assert output["items"][0]["status"] == "success"
    assert output["items"][0]["started_at"] == FINISHED.isoformat()


def test_run_command_unknown_id_exits_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "get_sync_run", lambda _run_id: None)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["run", "missing"])

    assert excinfo.value.code == 1


def test_run_command_prints_aggregates(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    detail = SyncRunDetail(run=_view(), aggregates={"counts": {"total": 1}})
    monkeypatch.setattr(cli_module, "get_sync_run", lambda _run_id: detail)

    cli_module.main(["run", "run-1"])

    output = json.loads(capsys.readouterr().out)
    assert output["run"]["id"] == "run-1"
    assert output["aggregates"] == {"counts": {"total": 1}}


def test_state_command_prints_states(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    calls: list[str | None] = []

    def fake_states(vendor: str | None = None) -> list[VendorSyncState]:
        calls.append(vendor)
        return [VendorSyncState(vendor="acme", total_items=3, last_run_at=FINISHED)]

    monkeypatch.setattr(cli_module, "get_vendor_states", fake_states)

    cli_module.main(["state"])

    assert calls == [None]
    [state] = json.loads(capsys.readouterr().out)
    assert state["vendor"] == "acme"
    assert state["last_run_at"] == FINISHED.isoformat()
