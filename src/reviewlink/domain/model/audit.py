"""Append-only audit trail of client-facing events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from reviewlink.domain.model.base import TenantOwned, utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from reviewlink.domain.model.enums import ClientActionKind


@dataclass(eq=False, kw_only=True)
class ClientAction(TenantOwned):
    client_id: UUID
    action: ClientActionKind
    actor_id: str | None = None  # None for system-originated events
    meta: dict[str, Any] = field(default_factory=dict[str, Any])
    created_at: datetime = field(default_factory=utcnow)
