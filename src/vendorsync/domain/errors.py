"""Error taxonomy for vendor catalog synchronisation."""

from __future__ import annotations


class VendorSyncError(Exception):
    """Base class for sync failures."""


class WriteError(VendorSyncError):
    """Raised when the storage layer fails while applying a diff."""


class TransactionDroppedError(WriteError):
    """Raised by a unit of work whose interactive transaction was lost mid-flight.

    Pooled or serverless connections can drop long-lived transactions; the
    apply engine treats this error as the signal to retry or fall back to
    per-write commits.
    """


class RecordNotFoundError(WriteError):
    """Raised when an update targets a record that vanished after the diff was computed."""

    def __init__(self, entity: str, record_id: str) -> None:
        super().__init__(f"{entity} {record_id} not found")
        self.entity = entity
        self.record_id = record_id


class FeedError(VendorSyncError):
    """Raised when a vendor feed cannot be located, read or parsed."""


class VendorSyncInProgressError(VendorSyncError):
    """Raised when a non-blocking sync finds another run active for the vendor."""

    def __init__(self, vendor: str) -> None:
        super().__init__(f"A sync run for vendor {vendor!r} is already in progress")
        self.vendor = vendor
