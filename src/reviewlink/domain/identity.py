"""Deterministic comparison keys for free-text human names.

Names reach us from two unrelated sources (review platform author names and
client display names) with inconsistent casing, accents, and punctuation.
Equivalence is exact equality of the keys produced here; there is no fuzzy
matching.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Final

_NON_ALNUM: Final[re.Pattern[str]] = re.compile(r"[^a-z0-9]")


def normalize_name(value: str | None) -> str | None:
    """Return the canonical comparison key for ``value``.

    Accents are stripped after NFKD decomposition, the text is lower-cased, and
    everything outside ASCII letters and digits is removed. Returns ``None``
    when nothing comparable is left; callers must never treat two ``None`` keys
    as equal.
    """

    if not value:
        return None
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    key = _NON_ALNUM.sub("", stripped.lower())
    return key or None

