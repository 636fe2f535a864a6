"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Sentiment(StrEnum):
    """Cached classification of a client, derived from review outcomes."""

    GOOD = "good"
    BAD = "bad"
    UNREVIEWED = "unreviewed"


class ClientActionKind(StrEnum):
    EMAIL_SENT = "email_sent"
    LINK_CLICKED = "link_clicked"
    REVIEW_CLICKED = "review_clicked"
    REVIEW_SUBMITTED = "review_submitted"


class ReviewSource(StrEnum):
    """Origin recorded in audit metadata when a review is mirrored."""

    GOOGLE_REVIEW = "google_review"
