"""Application configuration helpers."""

from __future__ import annotations

from .api import ApiConfig, get_api_config
from .env import optional_env_var, positive_int_env_var
from .errors import ConfigurationError, InvalidConfigurationValueError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ApiConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationValueError",
    "StorageConfig",
    "configure_logging",
    "get_api_config",
    "get_database_config",
    "get_storage_config",
    "optional_env_var",
    "positive_int_env_var",
]
