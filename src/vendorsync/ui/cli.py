from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from vendorsync.app import get_sync_run, get_vendor_states, list_sync_runs, sync_vendor_catalog
from vendorsync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise vendor catalogs")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Sync one vendor's catalog feed")
    sync.add_argument("vendor", type=str, help="Vendor slug, e.g. acme")
    sync.add_argument(
        "--source",
        type=str,
        help="Feed file to read (defaults to CATALOG_<VENDOR>_PATH, then the data dir)",
    )
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and record the diff without writing catalog changes",
    )
    sync.add_argument(
        "--actor",
        type=str,
        help="Who triggered the run (defaults to config)",
    )
    sync.add_argument(
        "--no-wait",
        action="store_true",
        help="Fail instead of waiting when a run for the vendor is already active",
    )

    runs = subparsers.add_parser("runs", help="List recorded sync runs")
    runs.add_argument("--vendor", type=str, help="Only runs for this vendor")
    runs.add_argument("--page", type=int, default=1, help="Page number (default: %(default)s)")
    runs.add_argument(
        "--page-size",
        type=int,
        default=20,
        help="Runs per page (default: %(default)s)",
    )

    run = subparsers.add_parser("run", help="Show one sync run with its stored diff")
    run.add_argument("run_id", type=str, help="Sync run id")

    state = subparsers.add_parser("state", help="Show per-vendor sync state")
    state.add_argument("vendor", nargs="?", type=str, help="Vendor slug (default: all)")

    parsed = parser.parse_args(list(argv))
    if parsed.command == "runs" and (parsed.page < 1 or parsed.page_size < 1):
        raise ValueError("--page and --page-size must be positive")
    return parsed


def _json_default(value: object) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Cannot serialise {type(value).__name__}")


def _emit(payload: object) -> None:
    print(json.dumps(payload, indent=2, default=_json_default))  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "sync":
            result = sync_vendor_catalog(
                parsed_args.vendor,
                source_path=parsed_args.source,
                actor=parsed_args.actor,
                dry_run=parsed_args.dry_run,
                blocking=not parsed_args.no_wait,
            )
            log.info(
                "Sync finished: run=%s created=%s updated=%s unchanged=%s removed=%s",
                result.run_id,
                result.summary.created,
                result.summary.updated,
                result.summary.unchanged,
                result.summary.removed,
            )
            _emit({"run_id": result.run_id, "summary": asdict(result.summary)})
        elif parsed_args.command == "runs":
            page = list_sync_runs(
                vendor=parsed_args.vendor,
                page=parsed_args.page,
                page_size=parsed_args.page_size,
            )
            _emit(asdict(page))
        elif parsed_args.command == "run":
            detail = get_sync_run(parsed_args.run_id)
            if detail is None:
                raise LookupError(f"Sync run {parsed_args.run_id} not found")  # noqa: TRY301
            _emit(asdict(detail))
        elif parsed_args.command == "state":
            states = get_vendor_states(parsed_args.vendor)
            _emit([asdict(state) for state in states])
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
