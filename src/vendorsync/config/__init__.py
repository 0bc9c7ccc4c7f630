"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .feed import FeedConfig, feed_env_var, get_feed_config
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "FeedConfig",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "feed_env_var",
    "get_database_config",
    "get_database_uri",
    "get_feed_config",
    "get_storage_config",
    "get_sync_config",
]
