"""Pydantic wire models for the reconciliation HTTP endpoints.

Field names are camelCase on the wire. Ids are accepted as loose strings so
malformed values reach the domain validation and produce its error codes.
A match id that is not a string at all is read as missing, which makes that
pair ineligible instead of failing the whole body.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID  # noqa: TC003

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


def _text_or_none(value: object) -> object:
    # A non-string id cannot name a row; the pair is then skipped, not rejected.
    return value if isinstance(value, str) else None


LooseId = Annotated[str | None, BeforeValidator(_text_or_none)]


class DiscoverRequestBody(ApiModel):
    tenant_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tenantId", "businessId"),
    )


class MatchIn(ApiModel):
    external_review_id: LooseId = Field(
        default=None,
        validation_alias=AliasChoices("externalReviewId", "googleReviewId"),
    )
    client_id: LooseId = Field(default=None, validation_alias=AliasChoices("clientId"))
    author_name: str | None = Field(default=None, validation_alias=AliasChoices("authorName"))
    client_display_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("clientDisplayName", "displayName"),
    )


class LinkRequestBody(ApiModel):
    tenant_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tenantId", "businessId"),
    )
    matches: list[MatchIn] = Field(default_factory=list["MatchIn"])


class MatchOut(ApiModel):
    external_review_id: UUID
    client_id: UUID
    author_name: str | None = None
    client_display_name: str | None = None


class DiscoverResponseBody(ApiModel):
    success: bool = True
    tenant_id: UUID
    match_count: int
    matches: list[MatchOut]


class LinkedOut(ApiModel):
    external_review_id: UUID
    client_id: UUID
    internal_review_id: UUID
    author_name: str | None = None
    client_display_name: str | None = None


class LinkResponseBody(ApiModel):
    success: bool = True
    tenant_id: UUID
    linked_count: int
    results: list[LinkedOut]


class ErrorBody(ApiModel):
    error: str
    message: str
