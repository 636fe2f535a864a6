"""Reconciliation of externally ingested reviews with a business's clients.

Flow:
1) ``discover_matches`` proposes (external review, client) pairs by exact
   normalized-name equality
2) the caller confirms a subset, possibly edited
3) ``link_matches`` mirrors each eligible pair into an internal review in one
   tenant-bound transaction
"""

from __future__ import annotations

from .contracts import (
    ConfirmedMatch,
    DiscoveryResult,
    LinkedMatch,
    LinkRequest,
    LinkResult,
    MatchProposal,
)
from .discovery import discover_matches, index_clients_by_name, propose_matches
from .identifiers import parse_identifier
from .link import link_matches, validate_link_request
from .sentiment import HAPPY_STAR_THRESHOLD, derive_happy, sentiment_for

__all__ = [
    "HAPPY_STAR_THRESHOLD",
    "ConfirmedMatch",
    "DiscoveryResult",
    "LinkRequest",
    "LinkResult",
    "LinkedMatch",
    "MatchProposal",
    "derive_happy",
    "discover_matches",
    "index_clients_by_name",
    "link_matches",
    "parse_identifier",
    "propose_matches",
    "sentiment_for",
    "validate_link_request",
]
