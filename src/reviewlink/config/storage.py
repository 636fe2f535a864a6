"""Database configuration: connection URI and pool bounds."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import positive_int_env_var

APP_DIR_NAME: Final[str] = "reviewlink"
DEFAULT_DB_FILENAME: Final[str] = "reviewlink.db"
DEFAULT_POOL_SIZE: Final[int] = 5


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local data directory used when no ``DATABASE_URI`` is configured."""

    data_dir: Path

    def database_uri(self) -> str:
        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{data_dir / DEFAULT_DB_FILENAME}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Connection settings for the shared storage pool.

    ``pool_size`` bounds the number of pooled connections; every request draws
    one transaction from it and always hands it back.
    """

    uri: str
    pool_size: int = DEFAULT_POOL_SIZE


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("REVIEWLINK_DATA_DIR")
    if env_dir:
        return StorageConfig(data_dir=Path(env_dir))
    xdg_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
    return StorageConfig(data_dir=base / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    pool_size = positive_int_env_var("DATABASE_POOL_SIZE", DEFAULT_POOL_SIZE)
    uri = os.getenv("DATABASE_URI") or (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri, pool_size=pool_size)
