"""Base building blocks: identity and timestamps."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain, before any flush."""

    id: UUID = field(default_factory=new_id)


@dataclass(eq=False, kw_only=True)
class TenantOwned(Entity):
    """Entity that belongs to exactly one business (tenant)."""

    business_id: UUID
