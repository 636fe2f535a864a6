"""Public domain model surface."""

from __future__ import annotations

from reviewlink.domain.model.audit import ClientAction
from reviewlink.domain.model.base import Entity, TenantOwned, new_id, utcnow
from reviewlink.domain.model.enums import ClientActionKind, ReviewSource, Sentiment
from reviewlink.domain.model.reviews import ExternalReview, InternalReview
from reviewlink.domain.model.tenancy import Business, CallerIdentity, Client

__all__ = [
    "Business",
    "CallerIdentity",
    "Client",
    "ClientAction",
    "ClientActionKind",
    "Entity",
    "ExternalReview",
    "InternalReview",
    "ReviewSource",
    "Sentiment",
    "TenantOwned",
    "new_id",
    "utcnow",
]
