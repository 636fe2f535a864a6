"""Syntactic checks for externally supplied identifiers."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final
from uuid import UUID

from reviewlink.domain.errors import InvalidInputError

if TYPE_CHECKING:
    from collections.abc import Iterable

_UUID_TEXT: Final[re.Pattern[str]] = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def parse_identifier(value: str | None) -> UUID | None:
    """Return the UUID for canonical 36-character text, ``None`` for anything else."""

    if value is None:
        return None
    candidate = value.strip()
    if not _UUID_TEXT.match(candidate):
        return None
    return UUID(candidate)


def require_business_id(value: str | None) -> UUID:
    business_id = parse_identifier(value)
    if business_id is None:
        raise InvalidInputError("Valid businessId is required.")
    return business_id


def valid_identifiers(values: Iterable[str | None]) -> set[UUID]:
    parsed = (parse_identifier(value) for value in values)
    return {value for value in parsed if value is not None}
