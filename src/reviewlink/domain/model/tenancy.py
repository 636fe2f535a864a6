"""Tenant root and the contacts it tracks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from reviewlink.domain.model.base import Entity, TenantOwned, utcnow
from reviewlink.domain.model.enums import Sentiment

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class CallerIdentity:
    """Verified identity of the caller, resolved by the authentication collaborator."""

    user_id: str

    def __post_init__(self) -> None:
        if not self.user_id or not self.user_id.strip():
            raise ValueError("CallerIdentity requires a non-blank user_id")


@dataclass(eq=False, kw_only=True)
class Business(Entity):
    """Tenant root; owns clients and both kinds of reviews."""

    owner_id: str
    name: str
    created_at: datetime = field(default_factory=utcnow)


@dataclass(eq=False, kw_only=True)
class Client(TenantOwned):
    """A tracked contact of a business.

    ``sentiment`` is a cached, derived value. ``None`` and
    :attr:`Sentiment.UNREVIEWED` both mean "no judgement yet"; only those may be
    overwritten by reconciliation.
    """

    display_name: str | None = None
    sentiment: Sentiment | None = Sentiment.UNREVIEWED
    created_at: datetime = field(default_factory=utcnow)
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def sentiment_is_open(self) -> bool:
        return self.sentiment is None or self.sentiment is Sentiment.UNREVIEWED
