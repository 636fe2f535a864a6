from __future__ import annotations

import pytest

from reviewlink.domain.model import CallerIdentity, Sentiment
from tests.helpers.reconciliation import make_business, make_client, make_external_review


@pytest.mark.parametrize("user_id", ["", "   "])
def test_caller_identity_rejects_blank_user(user_id: str) -> None:
    with pytest.raises(ValueError, match="non-blank"):
        CallerIdentity(user_id=user_id)


@pytest.mark.parametrize(
    ("sentiment", "is_open"),
    [(None, True), (Sentiment.UNREVIEWED, True), (Sentiment.GOOD, False), (Sentiment.BAD, False)],
)
def test_client_sentiment_is_open(sentiment: Sentiment | None, *, is_open: bool) -> None:
    client = make_client(make_business(), "Any", sentiment=sentiment)

    assert client.sentiment_is_open is is_open


def test_external_review_link_is_one_way() -> None:
    review = make_external_review(make_business(), "Someone")

    review.mark_linked()
    review.mark_linked()

    assert review.linked is True
