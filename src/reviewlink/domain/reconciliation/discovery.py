"""Match discovery: propose external review / client pairs for one business.

Discovery is read-only. Names are compared by exact equality of their
normalized keys; when several clients share a key, the first one in load
order is proposed and the others are ignored.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from reviewlink.domain.errors import StorageWriteError, UnauthorizedError
from reviewlink.domain.identity import normalize_name

from .contracts import DiscoveryResult, MatchProposal
from .identifiers import require_business_id

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from reviewlink.domain.model import CallerIdentity, Client, ExternalReview
    from reviewlink.domain.ports.unit_of_work import TransactionFactory

log = logging.getLogger(__name__)


def index_clients_by_name(clients: Iterable[Client]) -> dict[str, list[Client]]:
    """Group clients by normalized display name, preserving input order per key."""

    index: defaultdict[str, list[Client]] = defaultdict(list)
    for client in clients:
        key = normalize_name(client.display_name)
        if key is None:
            continue
        index[key].append(client)
    return dict(index)


def propose_matches(
    reviews: Iterable[ExternalReview],
    clients: Sequence[Client],
) -> list[MatchProposal]:
    index = index_clients_by_name(clients)
    proposals: list[MatchProposal] = []
    for review in reviews:
        if review.linked:
            continue
        key = normalize_name(review.author_name)
        if key is None:
            continue
        candidates = index.get(key)
        if not candidates:
            continue
        if len(candidates) > 1:
            log.debug(
                "Ambiguous name for review %s: %d clients share key, using first",
                review.id,
                len(candidates),
            )
        chosen = candidates[0]
        proposals.append(
            MatchProposal(
                external_review_id=review.id,
                client_id=chosen.id,
                author_name=review.author_name,
                client_display_name=chosen.display_name,
            )
        )
    return proposals


def discover_matches(
    business_id: str | None,
    *,
    identity: CallerIdentity | None,
    transactions: TransactionFactory,
) -> DiscoveryResult:
    """Propose a client for every unlinked external review of ``business_id``."""

    tenant_id: UUID = require_business_id(business_id)
    if identity is None:
        raise UnauthorizedError

    try:
        with transactions(identity) as tx:
            reviews = tx.repositories.external_reviews.list_unlinked(tenant_id)
            clients = tx.repositories.clients.list_active(tenant_id)
            proposals = propose_matches(reviews, clients)
    except StorageWriteError:
        log.exception("Discovery read failed for business %s; nothing was written", tenant_id)
        raise

    log.info(
        "Discovery for business %s: reviews=%d, clients=%d, matches=%d",
        tenant_id,
        len(reviews),
        len(clients),
        len(proposals),
    )
    return DiscoveryResult(business_id=tenant_id, matches=tuple(proposals))
