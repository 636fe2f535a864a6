"""Tenant-bound transaction boundary around the reconciliation repositories."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from reviewlink.domain.model import CallerIdentity
    from reviewlink.domain.ports.persistence import (
        BusinessRepository,
        ClientActionRepository,
        ClientRepository,
        ExternalReviewRepository,
        InternalReviewRepository,
    )


@dataclass(slots=True, frozen=True)
class ReconciliationRepositories:
    """Repositories reachable inside one tenant-bound transaction."""

    businesses: BusinessRepository
    clients: ClientRepository
    external_reviews: ExternalReviewRepository
    internal_reviews: InternalReviewRepository
    client_actions: ClientActionRepository


@runtime_checkable
class TenantTransaction(Protocol):
    """A transaction whose storage session is bound to one caller identity.

    The binding happens on ``__enter__``, before repositories become
    available, and is discarded when the transaction ends. Leaving the block
    without :meth:`commit` discards every write.
    """

    @property
    def identity(self) -> CallerIdentity: ...

    @property
    def repositories(self) -> ReconciliationRepositories: ...

    def __enter__(self) -> TenantTransaction: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


type TransactionFactory = Callable[[CallerIdentity], TenantTransaction]
