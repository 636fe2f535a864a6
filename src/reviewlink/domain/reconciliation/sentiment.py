"""Star rating to sentiment derivation used when mirroring external reviews."""

from __future__ import annotations

from decimal import Decimal
from typing import Final

from reviewlink.domain.model import Sentiment

# Kept separate from any display-facing "positive review" threshold on purpose.
HAPPY_STAR_THRESHOLD: Final[Decimal] = Decimal(3)


def derive_happy(stars: Decimal | float | None) -> bool | None:
    """Return ``True`` for ``stars >= 3``, ``False`` below, ``None`` when unrated."""

    if stars is None:
        return None
    value = stars if isinstance(stars, Decimal) else Decimal(str(stars))
    if value.is_nan():
        return None
    return value >= HAPPY_STAR_THRESHOLD


def sentiment_for(happy: bool | None) -> Sentiment | None:
    if happy is None:
        return None
    return Sentiment.GOOD if happy else Sentiment.BAD
