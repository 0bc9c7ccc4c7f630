"""Per-vendor serialization for sync runs.

The apply engine does not guard against two runs for the same vendor
interleaving their writes. Callers that can trigger syncs concurrently hold
the vendor's lock around the whole run.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from vendorsync.domain.errors import VendorSyncInProgressError

if TYPE_CHECKING:
    from collections.abc import Iterator


class VendorLocks:
    """One in-process lock per vendor slug."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, vendor: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(vendor)
            if lock is None:
                lock = threading.Lock()
                self._locks[vendor] = lock
            return lock

    def is_locked(self, vendor: str) -> bool:
        return self._lock_for(vendor).locked()

    @contextmanager
    def hold(self, vendor: str, *, blocking: bool = True) -> Iterator[None]:
        """Hold ``vendor``'s lock; raise ``VendorSyncInProgressError`` if busy and not blocking."""

        lock = self._lock_for(vendor)
        if not lock.acquire(blocking=blocking):
            raise VendorSyncInProgressError(vendor)
        try:
            yield
        finally:
            lock.release()
