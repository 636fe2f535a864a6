"""Ports for persisting tenant-scoped aggregates.

Every query method takes the business id explicitly. Implementations are
additionally bound to the caller identity of the transaction that created
them, so rows of businesses the caller does not own are never visible.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

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


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class BusinessRepository(Repository[Business], Protocol):
    def get(self, business_id: UUID) -> Business | None: ...


@runtime_checkable
class ClientRepository(Repository[Client], Protocol):
    def list_active(self, business_id: UUID) -> Sequence[Client]:
        """Non-deleted clients of the business, in stable load order."""
        ...

    def active_by_ids(self, business_id: UUID, client_ids: Collection[UUID]) -> dict[UUID, Client]:
        ...

    def fill_sentiment(self, client: Client, sentiment: Sentiment) -> bool:
        """Set ``sentiment`` only where the stored value is null or unreviewed.

        Returns whether the row was changed.
        """
        ...


@runtime_checkable
class ExternalReviewRepository(Repository[ExternalReview], Protocol):
    def list_unlinked(self, business_id: UUID) -> Sequence[ExternalReview]: ...

    def lock_by_ids(
        self, business_id: UUID, review_ids: Collection[UUID]
    ) -> dict[UUID, ExternalReview]:
        """Load reviews by id, holding an exclusive lock until the transaction ends."""
        ...


@runtime_checkable
class InternalReviewRepository(Repository[InternalReview], Protocol):
    def for_external_review(self, external_review_id: UUID) -> InternalReview | None: ...


@runtime_checkable
class ClientActionRepository(Repository[ClientAction], Protocol):
    def for_client(self, client_id: UUID) -> Sequence[ClientAction]: ...
