"""Caller identity resolution for HTTP requests.

Authentication itself happens upstream; this module only turns whatever the
authentication collaborator attached to the request into a
:class:`CallerIdentity`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from reviewlink.config.api import DEFAULT_IDENTITY_HEADER
from reviewlink.domain.model import CallerIdentity

if TYPE_CHECKING:
    from fastapi import Request


class IdentityResolver(Protocol):
    def __call__(self, request: Request) -> CallerIdentity | None: ...


@dataclass(frozen=True, slots=True)
class HeaderIdentityResolver:
    """Trust a user id header set by the authenticating proxy in front of the API."""

    header: str = DEFAULT_IDENTITY_HEADER

    def __call__(self, request: Request) -> CallerIdentity | None:
        value = request.headers.get(self.header)
        if value is None or not value.strip():
            return None
        return CallerIdentity(user_id=value.strip())
