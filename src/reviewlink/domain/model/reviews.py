"""External (third-party) and internal review records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from reviewlink.domain.model.base import TenantOwned, utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class ExternalReview(TenantOwned):
    """A review ingested from a third-party platform.

    ``linked`` only ever moves from ``False`` to ``True``; a linked review is
    terminal for matching.
    """

    author_name: str | None = None
    review: str | None = None
    stars: Decimal | None = None
    published_at: datetime | None = None
    linked: bool = False

    def mark_linked(self) -> None:
        self.linked = True


@dataclass(eq=False, kw_only=True)
class InternalReview(TenantOwned):
    """The system's canonical review record. Append-only."""

    client_id: UUID
    created_by: str | None = None
    review: str = ""
    stars: Decimal | None = None
    happy: bool | None = None
    external_review_id: UUID | None = None
    created_at: datetime = field(default_factory=utcnow)
