"""Feed location settings."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from .storage import StorageConfig, get_storage_config

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def feed_env_var(vendor: str) -> str:
    """``acme-optics`` -> ``CATALOG_ACME_OPTICS_PATH``."""

    token = _NON_ALNUM.sub("_", vendor.strip()).strip("_").upper()
    return f"CATALOG_{token}_PATH"


@dataclass(frozen=True, slots=True)
class FeedConfig:
    storage: StorageConfig

    def candidate_paths(self, vendor: str, explicit: str | Path | None = None) -> list[str]:
        """Paths to try, in order, without duplicates."""

        candidates: list[str] = []

        def push(value: str | Path | None) -> None:
            if not value:
                return
            resolved = str(Path(value).expanduser().resolve())
            if resolved not in candidates:
                candidates.append(resolved)

        push(explicit)
        push(os.getenv(feed_env_var(vendor)))
        push(self.storage.feeds_dir() / f"{vendor}.catalog.json")
        return candidates


def get_feed_config(*, storage: StorageConfig | None = None) -> FeedConfig:
    return FeedConfig(storage=storage or get_storage_config())
