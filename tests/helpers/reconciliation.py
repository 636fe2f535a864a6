"""Reusable fakes and builders for reconciliation tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from reviewlink.domain.errors import StorageWriteError
from reviewlink.domain.model import (
    Business,
    CallerIdentity,
    Client,
    ClientAction,
    ExternalReview,
    InternalReview,
    Sentiment,
)
from reviewlink.domain.ports.unit_of_work import ReconciliationRepositories

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from types import TracebackType
    from uuid import UUID

    from reviewlink.adapters.sqlalchemy.unit_of_work import SqlAlchemyDatabase

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def make_business(owner_id: str = "owner-a", name: str = "Example Dental") -> Business:
    return Business(owner_id=owner_id, name=name, created_at=BASE_TIME)


def make_client(
    business: Business,
    display_name: str | None,
    *,
    sentiment: Sentiment | None = Sentiment.UNREVIEWED,
    offset: int = 0,
    deleted: bool = False,
) -> Client:
    created_at = BASE_TIME + timedelta(minutes=offset)
    return Client(
        business_id=business.id,
        display_name=display_name,
        sentiment=sentiment,
        created_at=created_at,
        deleted_at=created_at if deleted else None,
    )


def make_external_review(
    business: Business,
    author_name: str | None,
    *,
    stars: Decimal | str | None = "4",
    text: str | None = "Great visit",
    offset: int = 0,
    linked: bool = False,
) -> ExternalReview:
    return ExternalReview(
        business_id=business.id,
        author_name=author_name,
        review=text,
        stars=Decimal(stars) if isinstance(stars, str) else stars,
        published_at=BASE_TIME - timedelta(days=1) + timedelta(minutes=offset),
        linked=linked,
    )


@dataclass
class TenantStore:
    """Committed state shared by every fake transaction."""

    businesses: dict[UUID, Business] = field(default_factory=dict)
    clients: dict[UUID, Client] = field(default_factory=dict)
    external_reviews: dict[UUID, ExternalReview] = field(default_factory=dict)
    internal_reviews: dict[UUID, InternalReview] = field(default_factory=dict)
    client_actions: dict[UUID, ClientAction] = field(default_factory=dict)
    opened: list[CallerIdentity] = field(default_factory=list)
    commits: int = 0
    fail_on_internal_review_add: int | None = None

    def seed(self, *entities: Business | Client | ExternalReview | InternalReview) -> None:
        for entity in entities:
            match entity:
                case Business():
                    self.businesses[entity.id] = entity
                case Client():
                    self.clients[entity.id] = entity
                case ExternalReview():
                    self.external_reviews[entity.id] = entity
                case InternalReview():
                    self.internal_reviews[entity.id] = entity

    def transaction(self, identity: CallerIdentity) -> FakeTenantTransaction:
        return FakeTenantTransaction(self, identity)


class _FakeRepositoryBase:
    def __init__(self, state: TenantStore, identity: CallerIdentity) -> None:
        self.state = state
        self.identity = identity

    def _owned(self, business_id: UUID) -> bool:
        business = self.state.businesses.get(business_id)
        return business is not None and business.owner_id == self.identity.user_id


class FakeBusinessRepository(_FakeRepositoryBase):
    def add(self, entity: Business) -> None:
        self.state.businesses[entity.id] = entity

    def get(self, business_id: UUID) -> Business | None:
        return self.state.businesses.get(business_id) if self._owned(business_id) else None


class FakeClientRepository(_FakeRepositoryBase):
    def add(self, entity: Client) -> None:
        self.state.clients[entity.id] = entity

    def list_active(self, business_id: UUID) -> Sequence[Client]:
        if not self._owned(business_id):
            return []
        clients = [
            client
            for client in self.state.clients.values()
            if client.business_id == business_id and not client.is_deleted
        ]
        return sorted(clients, key=lambda client: (client.created_at, str(client.id)))

    def active_by_ids(self, business_id: UUID, client_ids: Collection[UUID]) -> dict[UUID, Client]:
        return {
            client.id: client
            for client in self.list_active(business_id)
            if client.id in client_ids
        }

    def fill_sentiment(self, client: Client, sentiment: Sentiment) -> bool:
        stored = self.state.clients.get(client.id)
        if stored is None or not self._owned(stored.business_id) or not stored.sentiment_is_open:
            return False
        stored.sentiment = sentiment
        return True


class FakeExternalReviewRepository(_FakeRepositoryBase):
    def add(self, entity: ExternalReview) -> None:
        self.state.external_reviews[entity.id] = entity

    def list_unlinked(self, business_id: UUID) -> Sequence[ExternalReview]:
        if not self._owned(business_id):
            return []
        reviews = [
            review
            for review in self.state.external_reviews.values()
            if review.business_id == business_id and not review.linked
        ]
        return sorted(
            reviews,
            key=lambda review: (
                review.published_at is None,
                review.published_at or BASE_TIME,
                str(review.id),
            ),
        )

    def lock_by_ids(
        self, business_id: UUID, review_ids: Collection[UUID]
    ) -> dict[UUID, ExternalReview]:
        if not self._owned(business_id):
            return {}
        return {
            review.id: review
            for review in self.state.external_reviews.values()
            if review.business_id == business_id and review.id in review_ids
        }


class FakeInternalReviewRepository(_FakeRepositoryBase):
    def __init__(self, state: TenantStore, identity: CallerIdentity, store: TenantStore) -> None:
        super().__init__(state, identity)
        self.store = store
        self.added = 0

    def add(self, entity: InternalReview) -> None:
        self.added += 1
        if self.store.fail_on_internal_review_add == self.added:
            raise StorageWriteError
        if any(
            existing.external_review_id == entity.external_review_id
            for existing in self.state.internal_reviews.values()
        ):
            raise StorageWriteError
        self.state.internal_reviews[entity.id] = entity

    def for_external_review(self, external_review_id: UUID) -> InternalReview | None:
        for review in self.state.internal_reviews.values():
            if review.external_review_id == external_review_id and self._owned(review.business_id):
                return review
        return None


class FakeClientActionRepository(_FakeRepositoryBase):
    def add(self, entity: ClientAction) -> None:
        self.state.client_actions[entity.id] = entity

    def for_client(self, client_id: UUID) -> Sequence[ClientAction]:
        return [
            action
            for action in self.state.client_actions.values()
            if action.client_id == client_id and self._owned(action.business_id)
        ]


def _snapshot[TEntity](entities: dict[UUID, TEntity]) -> dict[UUID, TEntity]:
    return {key: replace(entity) for key, entity in entities.items()}  # type: ignore[type-var]


class FakeTenantTransaction:
    """Stages writes on a copy of the store; only ``commit`` publishes them."""

    def __init__(self, store: TenantStore, identity: CallerIdentity) -> None:
        self.store = store
        self._identity = identity
        self._working: TenantStore | None = None
        self._repositories: ReconciliationRepositories | None = None

    @property
    def identity(self) -> CallerIdentity:
        return self._identity

    @property
    def repositories(self) -> ReconciliationRepositories:
        assert self._repositories is not None, "transaction not entered"
        return self._repositories

    def __enter__(self) -> FakeTenantTransaction:
        self.store.opened.append(self._identity)
        working = TenantStore(
            businesses=_snapshot(self.store.businesses),
            clients=_snapshot(self.store.clients),
            external_reviews=_snapshot(self.store.external_reviews),
            internal_reviews=_snapshot(self.store.internal_reviews),
            client_actions=_snapshot(self.store.client_actions),
        )
        self._working = working
        self._repositories = ReconciliationRepositories(
            businesses=FakeBusinessRepository(working, self._identity),
            clients=FakeClientRepository(working, self._identity),
            external_reviews=FakeExternalReviewRepository(working, self._identity),
            internal_reviews=FakeInternalReviewRepository(working, self._identity, self.store),
            client_actions=FakeClientActionRepository(working, self._identity),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool:
        self._working = None
        self._repositories = None
        return False

    def commit(self) -> None:
        assert self._working is not None, "transaction not entered"
        self.store.businesses = self._working.businesses
        self.store.clients = self._working.clients
        self.store.external_reviews = self._working.external_reviews
        self.store.internal_reviews = self._working.internal_reviews
        self.store.client_actions = self._working.client_actions
        self.store.commits += 1

    def rollback(self) -> None:
        self._working = None


def seed_database(
    database: SqlAlchemyDatabase,
    identity: CallerIdentity,
    business: Business,
    *entities: Client | ExternalReview | InternalReview,
) -> None:
    """Persist ``business`` and then its children in one committed transaction."""

    with database.transaction(identity) as tx:
        tx.session.add(business)
        tx.session.flush()
        tx.session.add_all(entities)
        tx.commit()
