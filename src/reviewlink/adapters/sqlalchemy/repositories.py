"""Repository implementations backed by SQLAlchemy sessions.

Each repository is constructed for one caller identity and only ever sees
rows of businesses that identity owns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import or_, select, update
from sqlalchemy.orm.attributes import set_committed_value

from reviewlink.adapters.sqlalchemy.mappings import (
    business_table,
    client_action_table,
    client_table,
    external_review_table,
    internal_review_table,
)
from reviewlink.adapters.sqlalchemy.tenancy import owned_business_ids
from reviewlink.domain.model import (
    Business,
    Client,
    ClientAction,
    ExternalReview,
    InternalReview,
    Sentiment,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from uuid import UUID

    from sqlalchemy import CursorResult
    from sqlalchemy.orm import Session

    from reviewlink.domain.model import CallerIdentity


class _TenantScopedRepository:
    def __init__(self, session: Session, identity: CallerIdentity) -> None:
        self.session = session
        self.identity = identity


class SqlAlchemyBusinessRepository(_TenantScopedRepository):
    def add(self, entity: Business) -> None:
        self.session.add(entity)

    def get(self, business_id: UUID) -> Business | None:
        stmt = (
            select(Business)
            .where(business_table.c.id == business_id)
            .where(business_table.c.owner_id == self.identity.user_id)
        )
        return self.session.scalars(stmt).one_or_none()


class SqlAlchemyClientRepository(_TenantScopedRepository):
    def add(self, entity: Client) -> None:
        self.session.add(entity)

    def list_active(self, business_id: UUID) -> Sequence[Client]:
        stmt = (
            select(Client)
            .where(client_table.c.business_id == business_id)
            .where(client_table.c.business_id.in_(owned_business_ids(self.identity)))
            .where(client_table.c.deleted_at.is_(None))
            .order_by(client_table.c.created_at, client_table.c.id)
        )
        return self.session.scalars(stmt).all()

    def active_by_ids(self, business_id: UUID, client_ids: Collection[UUID]) -> dict[UUID, Client]:
        if not client_ids:
            return {}
        stmt = (
            select(Client)
            .where(client_table.c.id.in_(list(client_ids)))
            .where(client_table.c.business_id == business_id)
            .where(client_table.c.business_id.in_(owned_business_ids(self.identity)))
            .where(client_table.c.deleted_at.is_(None))
        )
        return {client.id: client for client in self.session.scalars(stmt)}

    def fill_sentiment(self, client: Client, sentiment: Sentiment) -> bool:
        stmt = (
            update(Client)
            .where(client_table.c.id == client.id)
            .where(client_table.c.business_id == client.business_id)
            .where(client_table.c.business_id.in_(owned_business_ids(self.identity)))
            .where(
                or_(
                    client_table.c.sentiment.is_(None),
                    client_table.c.sentiment == Sentiment.UNREVIEWED,
                )
            )
            .values(sentiment=sentiment)
            .execution_options(synchronize_session=False)
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        if result.rowcount == 0:
            return False
        set_committed_value(client, "sentiment", sentiment)
        return True


class SqlAlchemyExternalReviewRepository(_TenantScopedRepository):
    def add(self, entity: ExternalReview) -> None:
        self.session.add(entity)

    def list_unlinked(self, business_id: UUID) -> Sequence[ExternalReview]:
        stmt = (
            select(ExternalReview)
            .where(external_review_table.c.business_id == business_id)
            .where(external_review_table.c.business_id.in_(owned_business_ids(self.identity)))
            .where(external_review_table.c.linked.is_(False))
            .order_by(
                external_review_table.c.published_at.asc().nulls_last(),
                external_review_table.c.id,
            )
        )
        return self.session.scalars(stmt).all()

    def lock_by_ids(
        self, business_id: UUID, review_ids: Collection[UUID]
    ) -> dict[UUID, ExternalReview]:
        if not review_ids:
            return {}
        # FOR UPDATE is rendered only by dialects with row locks; SQLite
        # serialises writers at the database level instead.
        stmt = (
            select(ExternalReview)
            .where(external_review_table.c.id.in_(list(review_ids)))
            .where(external_review_table.c.business_id == business_id)
            .where(external_review_table.c.business_id.in_(owned_business_ids(self.identity)))
            .with_for_update(of=external_review_table)
        )
        return {review.id: review for review in self.session.scalars(stmt)}


class SqlAlchemyInternalReviewRepository(_TenantScopedRepository):
    def add(self, entity: InternalReview) -> None:
        self.session.add(entity)

    def for_external_review(self, external_review_id: UUID) -> InternalReview | None:
        stmt = (
            select(InternalReview)
            .where(internal_review_table.c.external_review_id == external_review_id)
            .where(internal_review_table.c.business_id.in_(owned_business_ids(self.identity)))
        )
        return self.session.scalars(stmt).one_or_none()


class SqlAlchemyClientActionRepository(_TenantScopedRepository):
    def add(self, entity: ClientAction) -> None:
        self.session.add(entity)

    def for_client(self, client_id: UUID) -> Sequence[ClientAction]:
        stmt = (
            select(ClientAction)
            .where(client_action_table.c.client_id == client_id)
            .where(client_action_table.c.business_id.in_(owned_business_ids(self.identity)))
            .order_by(client_action_table.c.created_at, client_action_table.c.id)
        )
        return self.session.scalars(stmt).all()


if TYPE_CHECKING:
    from reviewlink.domain.model import CallerIdentity as _Identity
    from reviewlink.domain.ports.persistence import (
        BusinessRepository,
        ClientActionRepository,
        ClientRepository,
        ExternalReviewRepository,
        InternalReviewRepository,
    )

    _session_stub = cast("Session", object())
    _identity_stub = _Identity(user_id="type-check")
    _business_repo: BusinessRepository = SqlAlchemyBusinessRepository(_session_stub, _identity_stub)
    _client_repo: ClientRepository = SqlAlchemyClientRepository(_session_stub, _identity_stub)
    _external_repo: ExternalReviewRepository = SqlAlchemyExternalReviewRepository(
        _session_stub, _identity_stub
    )
    _internal_repo: InternalReviewRepository = SqlAlchemyInternalReviewRepository(
        _session_stub, _identity_stub
    )
    _action_repo: ClientActionRepository = SqlAlchemyClientActionRepository(
        _session_stub, _identity_stub
    )
