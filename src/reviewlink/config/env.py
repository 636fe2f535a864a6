"""Environment variable loaders for configuration."""

from __future__ import annotations

import os

from .errors import InvalidConfigurationValueError


def optional_env_var(name: str, default: str) -> str:
    """Return ``name`` from the environment, falling back to ``default`` when unset or blank."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def positive_int_env_var(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        parsed = int(raw.strip())
    except ValueError as exc:
        raise InvalidConfigurationValueError(name, raw, "a positive integer") from exc
    if parsed <= 0:
        raise InvalidConfigurationValueError(name, raw, "a positive integer")
    return parsed
