"""HTTP adapter: FastAPI routes over the reconciliation service."""

from __future__ import annotations

from .api import create_app, create_app_from_config
from .identity import HeaderIdentityResolver, IdentityResolver

__all__ = [
    "HeaderIdentityResolver",
    "IdentityResolver",
    "create_app",
    "create_app_from_config",
]
