"""HTTP surface configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var, positive_int_env_var

DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8000
DEFAULT_IDENTITY_HEADER: Final[str] = "X-Authenticated-User"


@dataclass(frozen=True, slots=True)
class ApiConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    # Header populated by the upstream authentication collaborator.
    identity_header: str = DEFAULT_IDENTITY_HEADER


def get_api_config() -> ApiConfig:
    return ApiConfig(
        host=optional_env_var("REVIEWLINK_HOST", DEFAULT_HOST),
        port=positive_int_env_var("REVIEWLINK_PORT", DEFAULT_PORT),
        identity_header=optional_env_var("REVIEWLINK_IDENTITY_HEADER", DEFAULT_IDENTITY_HEADER),
    )
