"""Ports implemented by storage adapters."""

from __future__ import annotations

from .persistence import (
    BusinessRepository,
    ClientActionRepository,
    ClientRepository,
    ExternalReviewRepository,
    InternalReviewRepository,
    Repository,
)
from .unit_of_work import ReconciliationRepositories, TenantTransaction, TransactionFactory

__all__ = [
    "BusinessRepository",
    "ClientActionRepository",
    "ClientRepository",
    "ExternalReviewRepository",
    "InternalReviewRepository",
    "ReconciliationRepositories",
    "Repository",
    "TenantTransaction",
    "TransactionFactory",
]
