"""Request and result types shared by discovery and link commit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(slots=True, frozen=True)
class MatchProposal:
    """A candidate pairing of an external review with a client."""

    external_review_id: UUID
    client_id: UUID
    author_name: str | None
    client_display_name: str | None


@dataclass(slots=True, frozen=True)
class DiscoveryResult:
    business_id: UUID
    matches: tuple[MatchProposal, ...] = ()

    @property
    def match_count(self) -> int:
        return len(self.matches)


@dataclass(slots=True, frozen=True)
class ConfirmedMatch:
    """A pair confirmed by the caller, possibly edited after discovery.

    Ids are kept as raw text: a malformed id makes the pair ineligible instead
    of failing the whole request. ``author_name`` and ``client_display_name``
    are echoed back untouched.
    """

    external_review_id: str
    client_id: str
    author_name: str | None = None
    client_display_name: str | None = None

    @classmethod
    def from_proposal(cls, proposal: MatchProposal) -> ConfirmedMatch:
        return cls(
            external_review_id=str(proposal.external_review_id),
            client_id=str(proposal.client_id),
            author_name=proposal.author_name,
            client_display_name=proposal.client_display_name,
        )


@dataclass(slots=True, frozen=True)
class LinkRequest:
    business_id: str
    matches: tuple[ConfirmedMatch, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class LinkedMatch:
    external_review_id: UUID
    client_id: UUID
    internal_review_id: UUID
    author_name: str | None
    client_display_name: str | None


@dataclass(slots=True, frozen=True)
class LinkResult:
    business_id: UUID
    results: tuple[LinkedMatch, ...] = ()

    @property
    def linked_count(self) -> int:
        return len(self.results)
