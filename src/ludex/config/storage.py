"""Where ludex keeps its catalog database and HTTP cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "ludex"
CATALOG_DB_FILENAME: Final[str] = "catalog.db"
HTTP_CACHE_FILENAME: Final[str] = "bgg_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory plus an optional database URI that bypasses it."""

    data_dir: Path
    database_uri_override: str | None = None

    def file_path(self, filename: str) -> Path:
        """Return ``filename`` inside the data directory, creating the directory."""

        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / filename

    def http_cache_path(self) -> Path:
        return self.file_path(HTTP_CACHE_FILENAME)

    @property
    def database_uri(self) -> str:
        if self.database_uri_override:
            return self.database_uri_override
        return f"sqlite+pysqlite:///{self.file_path(CATALOG_DB_FILENAME)}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    explicit_dir = optional_env_var("LUDEX_DATA_DIR")
    return StorageConfig(
        data_dir=Path(explicit_dir) if explicit_dir else _platform_data_home() / APP_DIR_NAME,
        database_uri_override=optional_env_var("DATABASE_URI"),
    )


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri)
