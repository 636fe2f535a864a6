"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from reviewlink.adapters.sqlalchemy.unit_of_work import startup
from reviewlink.domain.reconciliation import (
    ConfirmedMatch,
    LinkRequest,
    LinkResult,
    discover_matches,
    link_matches,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from reviewlink.adapters.sqlalchemy.unit_of_work import SqlAlchemyDatabase
    from reviewlink.config import DatabaseConfig
    from reviewlink.domain.model import CallerIdentity
    from reviewlink.domain.ports.unit_of_work import TransactionFactory
    from reviewlink.domain.reconciliation import DiscoveryResult


log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationService:
    """Discovery and link commit bound to one transaction factory."""

    transactions: TransactionFactory

    def discover(self, business_id: str | None, identity: CallerIdentity | None) -> DiscoveryResult:
        return discover_matches(business_id, identity=identity, transactions=self.transactions)

    def link(self, request: LinkRequest, identity: CallerIdentity | None) -> LinkResult:
        return link_matches(request, identity=identity, transactions=self.transactions)

    def link_all_discovered(
        self, business_id: str | None, identity: CallerIdentity | None
    ) -> LinkResult:
        """Confirm every proposal from a fresh discovery and commit them in one call."""

        discovery = self.discover(business_id, identity)
        request = LinkRequest(
            business_id=str(discovery.business_id),
            matches=tuple(ConfirmedMatch.from_proposal(match) for match in discovery.matches),
        )
        if not request.matches:
            log.info("Nothing to link for business %s", discovery.business_id)
            return LinkResult(business_id=discovery.business_id)
        return self.link(request, identity)


def build_service(
    *,
    engine: Engine | None = None,
    database: DatabaseConfig | None = None,
) -> tuple[ReconciliationService, SqlAlchemyDatabase]:
    """Start the database and wire a service to it.

    The caller owns the returned database and must ``dispose()`` it.
    """

    db = startup(engine=engine, database=database)
    return ReconciliationService(transactions=db.transaction), db
