"""SQLAlchemy mapping metadata for the reviewlink domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    false,
    orm,
)
from sqlalchemy.orm import configure_mappers

from reviewlink.domain.model import (
    Business,
    Client,
    ClientAction,
    ClientActionKind,
    ExternalReview,
    InternalReview,
    Sentiment,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


def value_enum(enum_cls: type[StrEnum], name: str) -> Enum:
    """Persist enum values (``"good"``) rather than member names (``"GOOD"``)."""

    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=_enum_values,
        validate_strings=True,
    )


# Unbounded numeric: a fixed scale would round 2.999 up to 3.0.
StarsColumnType = Numeric(asdecimal=True)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Tenant root -----------------------------------------------------------------

business_table = Table(
    "business",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("owner_id", String, nullable=False, index=True),
    Column("name", String, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
)

client_table = Table(
    "client",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "business_id",
        UUIDColumnType,
        ForeignKey("business.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("display_name", String, nullable=True),
    Column("sentiment", value_enum(Sentiment, "sentiment"), nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("deleted_at", UTCDateTime, nullable=True),
)

# Reviews ---------------------------------------------------------------------

external_review_table = Table(
    "external_review",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "business_id",
        UUIDColumnType,
        ForeignKey("business.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("author_name", String, nullable=True),
    Column("review", Text, nullable=True),
    Column("stars", StarsColumnType, nullable=True),
    Column("published_at", UTCDateTime, nullable=True),
    Column("linked", Boolean, nullable=False, default=False, server_default=false()),
    Index("ix_external_review_business_linked", "business_id", "linked"),
)

internal_review_table = Table(
    "internal_review",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "business_id",
        UUIDColumnType,
        ForeignKey("business.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "client_id",
        UUIDColumnType,
        ForeignKey("client.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("created_by", String, nullable=True),
    Column("review", Text, nullable=False, default=""),
    Column("stars", StarsColumnType, nullable=True),
    Column("happy", Boolean, nullable=True),
    Column(
        "external_review_id",
        UUIDColumnType,
        ForeignKey("external_review.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("created_at", UTCDateTime, nullable=False),
    # At most one internal mirror per external review, even under concurrent links.
    UniqueConstraint("external_review_id"),
)

# Audit -----------------------------------------------------------------------

client_action_table = Table(
    "client_action",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "business_id",
        UUIDColumnType,
        ForeignKey("business.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "client_id",
        UUIDColumnType,
        ForeignKey("client.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("actor_id", String, nullable=True),
    Column("action", value_enum(ClientActionKind, "client_action_type"), nullable=False),
    Column("meta", JSON, nullable=False, default=dict),
    Column("created_at", UTCDateTime, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Business, business_table)
    mapper_registry.map_imperatively(Client, client_table)
    mapper_registry.map_imperatively(ExternalReview, external_review_table)
    mapper_registry.map_imperatively(InternalReview, internal_review_table)
    mapper_registry.map_imperatively(ClientAction, client_action_table)

    configure_mappers()
    return mapper_registry
