"""SQLAlchemy adapter package for reviewlink."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyBusinessRepository,
    SqlAlchemyClientActionRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyExternalReviewRepository,
    SqlAlchemyInternalReviewRepository,
)
from .tenancy import TENANT_SETTING, bind_identity, owned_business_ids

__all__ = [
    "TENANT_SETTING",
    "SqlAlchemyBusinessRepository",
    "SqlAlchemyClientActionRepository",
    "SqlAlchemyClientRepository",
    "SqlAlchemyExternalReviewRepository",
    "SqlAlchemyInternalReviewRepository",
    "bind_identity",
    "mapper_registry",
    "owned_business_ids",
    "start_mappers",
]
