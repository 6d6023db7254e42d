"""Application configuration helpers."""

from __future__ import annotations

from .bgg import BggConfig, get_bgg_config
from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .importing import ImportConfig, get_import_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "BggConfig",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "ImportConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_bgg_config",
    "get_database_config",
    "get_import_config",
    "get_storage_config",
    "optional_env_var",
]
