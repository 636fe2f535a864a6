"""Link commit: turn confirmed match pairs into durable, idempotent state.

All writes of one call share a single tenant-bound transaction. Pairs that
reference malformed, missing, foreign, deleted, or already linked rows are
skipped without error so a batch makes as much progress as it can; any
storage failure rolls back the whole call instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from reviewlink.domain.errors import InvalidInputError, StorageWriteError, UnauthorizedError
from reviewlink.domain.model import (
    ClientAction,
    ClientActionKind,
    InternalReview,
    ReviewSource,
    utcnow,
)

from .contracts import LinkedMatch, LinkResult
from .identifiers import parse_identifier, require_business_id, valid_identifiers
from .sentiment import derive_happy, sentiment_for

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from reviewlink.domain.model import CallerIdentity, Client, ExternalReview
    from reviewlink.domain.ports.unit_of_work import (
        ReconciliationRepositories,
        TransactionFactory,
    )

    from .contracts import ConfirmedMatch, LinkRequest

log = logging.getLogger(__name__)


@dataclass(slots=True)
class _PairLinker:
    repositories: ReconciliationRepositories
    business_id: UUID
    identity: CallerIdentity
    now: datetime

    def link(self, review: ExternalReview, client: Client, match: ConfirmedMatch) -> LinkedMatch:
        happy = derive_happy(review.stars)
        internal = InternalReview(
            business_id=self.business_id,
            client_id=client.id,
            created_by=self.identity.user_id,
            review=review.review or "",
            stars=review.stars,
            happy=happy,
            external_review_id=review.id,
            created_at=review.published_at or self.now,
        )
        self.repositories.internal_reviews.add(internal)

        sentiment = sentiment_for(happy)
        if sentiment is not None:
            self.repositories.clients.fill_sentiment(client, sentiment)

        self.repositories.client_actions.add(
            ClientAction(
                business_id=self.business_id,
                client_id=client.id,
                action=ClientActionKind.REVIEW_SUBMITTED,
                actor_id=None,
                meta={
                    "source": str(ReviewSource.GOOGLE_REVIEW),
                    "google_review_id": str(review.id),
                    "review_id": str(internal.id),
                    "stars": float(review.stars) if review.stars is not None else None,
                },
                created_at=self.now,
            )
        )
        review.mark_linked()

        return LinkedMatch(
            external_review_id=review.id,
            client_id=client.id,
            internal_review_id=internal.id,
            author_name=match.author_name,
            client_display_name=match.client_display_name,
        )


def _eligible_pair(
    match: ConfirmedMatch,
    reviews: dict[UUID, ExternalReview],
    clients: dict[UUID, Client],
) -> tuple[ExternalReview, Client] | None:
    review_id = parse_identifier(match.external_review_id)
    client_id = parse_identifier(match.client_id)
    if review_id is None or client_id is None:
        return None
    client = clients.get(client_id)
    if client is None or client.is_deleted:
        return None
    review = reviews.get(review_id)
    if review is None or review.linked:
        return None
    return review, client


def validate_link_request(
    request: LinkRequest,
    identity: CallerIdentity | None,
) -> tuple[UUID, CallerIdentity, set[UUID], set[UUID]]:
    """Reject a request before any storage access; return the parsed ids."""

    business_id = require_business_id(request.business_id)
    if not request.matches:
        raise InvalidInputError("No matches provided.")
    if identity is None:
        raise UnauthorizedError
    review_ids = valid_identifiers(match.external_review_id for match in request.matches)
    client_ids = valid_identifiers(match.client_id for match in request.matches)
    if not review_ids or not client_ids:
        raise InvalidInputError("At least one valid googleReviewId and clientId is required.")
    return business_id, identity, review_ids, client_ids


def link_matches(
    request: LinkRequest,
    *,
    identity: CallerIdentity | None,
    transactions: TransactionFactory,
    clock: Callable[[], datetime] = utcnow,
) -> LinkResult:
    """Mirror each eligible external review into an internal review for its client.

    Safe to repeat: a second identical call skips everything the first one
    linked and reports a smaller (possibly zero) count.
    """

    business_id, caller, review_ids, client_ids = validate_link_request(request, identity)

    results: list[LinkedMatch] = []
    try:
        with transactions(caller) as tx:
            repositories = tx.repositories
            reviews = repositories.external_reviews.lock_by_ids(business_id, review_ids)
            clients = repositories.clients.active_by_ids(business_id, client_ids)
            linker = _PairLinker(
                repositories=repositories,
                business_id=business_id,
                identity=caller,
                now=clock(),
            )
            for match in request.matches:
                pair = _eligible_pair(match, reviews, clients)
                if pair is None:
                    continue
                review, client = pair
                results.append(linker.link(review, client, match))
            tx.commit()
    except StorageWriteError:
        log.exception(
            "Link commit rolled back for business %s (%d pairs requested)",
            business_id,
            len(request.matches),
        )
        raise

    log.info(
        "Linked %d of %d requested pairs for business %s",
        len(results),
        len(request.matches),
        business_id,
    )
    return LinkResult(business_id=business_id, results=tuple(results))
