"""Per-transaction tenancy binding for SQLAlchemy sessions.

Two layers keep tenants apart:

- on PostgreSQL the caller's user id is written to the transaction-local
  setting ``app.user_id``; the row level security policies created by the
  initial migration filter every statement on it, and an unset setting
  matches no rows
- on every dialect, repository queries restrict ``business_id`` to the
  businesses owned by the bound user
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from sqlalchemy import Select, select, text

from reviewlink.adapters.sqlalchemy.mappings import business_table

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session

    from reviewlink.domain.model import CallerIdentity

log = logging.getLogger(__name__)

TENANT_SETTING: Final[str] = "app.user_id"
_RLS_DIALECTS: Final[frozenset[str]] = frozenset({"postgresql"})


def bind_identity(session: Session, identity: CallerIdentity) -> None:
    """Bind ``identity`` to the transaction that ``session`` is about to run.

    ``is_local => true`` scopes the setting to the current transaction, so a
    pooled connection never carries it into another caller's transaction.
    """

    dialect = session.get_bind().dialect.name
    if dialect in _RLS_DIALECTS:
        session.execute(
            text("SELECT set_config(:setting, :user_id, true)"),
            {"setting": TENANT_SETTING, "user_id": identity.user_id},
        )
    log.debug("Bound identity %s to %s transaction", identity.user_id, dialect)


def owned_business_ids(identity: CallerIdentity) -> Select[tuple[UUID]]:
    """Subquery of the business ids visible to ``identity``."""

    return select(business_table.c.id).where(business_table.c.owner_id == identity.user_id)
