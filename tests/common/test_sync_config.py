from __future__ import annotations

import pytest

from vendorsync.config import ConfigurationError, get_sync_config
from vendorsync.domain.sync import DEFAULT_DIFF_SAMPLE_LIMIT, TransactionPolicy

_VARS = (
    "VENDORSYNC_TX_MAX_ATTEMPTS",
    "VENDORSYNC_TX_BACKOFF_SECONDS",
    "VENDORSYNC_TX_FALLBACK",
    "VENDORSYNC_DIFF_SAMPLE_LIMIT",
    "VENDORSYNC_ACTOR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_sync_config_defaults() -> None:
    config = get_sync_config()

    assert config.transaction_policy == TransactionPolicy()
    assert config.diff_sample_limit == DEFAULT_DIFF_SAMPLE_LIMIT
    assert config.default_actor == "service"


def test_sync_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VENDORSYNC_TX_MAX_ATTEMPTS", "3")
    monkeypatch.setenv("VENDORSYNC_TX_BACKOFF_SECONDS", "0.25")
    monkeypatch.setenv("VENDORSYNC_TX_FALLBACK", "off")
    monkeypatch.setenv("VENDORSYNC_DIFF_SAMPLE_LIMIT", "10")
    monkeypatch.setenv("VENDORSYNC_ACTOR", " cron ")

    config = get_sync_config()

    assert config.transaction_policy == TransactionPolicy(
        max_attempts=3, backoff_seconds=0.25, fallback_without_transaction=False
    )
    assert config.diff_sample_limit == 10
    assert config.default_actor == "cron"


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VENDORSYNC_TX_MAX_ATTEMPTS", "   ")
    monkeypatch.setenv("VENDORSYNC_ACTOR", "")

    config = get_sync_config()

    assert config.transaction_policy.max_attempts == 1
    assert config.default_actor == "service"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("VENDORSYNC_TX_MAX_ATTEMPTS", "0"),
        ("VENDORSYNC_TX_MAX_ATTEMPTS", "many"),
        ("VENDORSYNC_TX_BACKOFF_SECONDS", "-1"),
        ("VENDORSYNC_TX_FALLBACK", "maybe"),
        ("VENDORSYNC_DIFF_SAMPLE_LIMIT", "-5"),
    ],
)
def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError) as exc:
        get_sync_config()

    assert name in str(exc.value)
