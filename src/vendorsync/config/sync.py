"""Synchronization defaults for vendor catalog runs."""

from __future__ import annotations

from dataclasses import dataclass, field

from vendorsync.domain.sync import DEFAULT_DIFF_SAMPLE_LIMIT, TransactionPolicy

from .env import env_bool, env_float, env_int, env_str

DEFAULT_ACTOR = "service"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    transaction_policy: TransactionPolicy = field(default_factory=TransactionPolicy)
    diff_sample_limit: int = DEFAULT_DIFF_SAMPLE_LIMIT
    default_actor: str = DEFAULT_ACTOR


def get_sync_config() -> SyncConfig:
    policy = TransactionPolicy(
        max_attempts=env_int("VENDORSYNC_TX_MAX_ATTEMPTS", 1, minimum=1),
        backoff_seconds=env_float("VENDORSYNC_TX_BACKOFF_SECONDS", 0.0, minimum=0.0),
        fallback_without_transaction=env_bool("VENDORSYNC_TX_FALLBACK", True),  # noqa: FBT003
    )
    return SyncConfig(
        transaction_policy=policy,
        diff_sample_limit=env_int(
            "VENDORSYNC_DIFF_SAMPLE_LIMIT", DEFAULT_DIFF_SAMPLE_LIMIT, minimum=0
        ),
        default_actor=env_str("VENDORSYNC_ACTOR", DEFAULT_ACTOR),
    )
