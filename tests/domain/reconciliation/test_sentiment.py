from __future__ import annotations

from decimal import Decimal

import pytest

from reviewlink.domain.model import Sentiment
from reviewlink.domain.reconciliation import HAPPY_STAR_THRESHOLD, derive_happy, sentiment_for


@pytest.mark.parametrize(
    ("stars", "expected"),
    [
        (Decimal(5), True),
        (Decimal("3.0"), True),
        (Decimal(3), True),
        (Decimal("2.999"), False),
        (Decimal("2.5"), False),
        (Decimal(0), False),
        (4, True),
        (2.5, False),
        (None, None),
        (Decimal("NaN"), None),
    ],
)
def test_derive_happy_uses_inclusive_threshold(
    stars: Decimal | float | None, expected: bool | None
) -> None:
    assert derive_happy(stars) is expected


def test_threshold_is_three_stars() -> None:
    assert Decimal(3) == HAPPY_STAR_THRESHOLD


def test_sentiment_for_maps_happiness() -> None:
    assert sentiment_for(True) is Sentiment.GOOD
    assert sentiment_for(False) is Sentiment.BAD
    assert sentiment_for(None) is None
