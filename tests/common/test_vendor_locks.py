from __future__ import annotations

import pytest

from vendorsync.common.locking import VendorLocks
from vendorsync.domain.errors import VendorSyncInProgressError


def test_hold_marks_vendor_locked_until_released() -> None:
    locks = VendorLocks()

    with locks.hold("acme"):
        assert locks.is_locked("acme")
        assert not locks.is_locked("zeiss")

    assert not locks.is_locked("acme")


def test_non_blocking_hold_raises_when_busy() -> None:
    locks = VendorLocks()

    with locks.hold("acme"), pytest.raises(VendorSyncInProgressError):  # noqa: SIM117
        with locks.hold("acme", blocking=False):
            pass

    with locks.hold("acme", blocking=False):
        assert locks.is_locked("acme")


def test_lock_is_released_when_body_raises() -> None:
    locks = VendorLocks()

    with pytest.raises(RuntimeError), locks.hold("acme"):
        raise RuntimeError("boom")

    assert not locks.is_locked("acme")
