"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from reviewlink.adapters.sqlalchemy.mappings import (
    StarsColumnType,
    UTCDateTime,
    UUIDColumnType,
    value_enum,
)
from reviewlink.adapters.sqlalchemy.tenancy import TENANT_SETTING
from reviewlink.domain.model import ClientActionKind, Sentiment

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_TENANT_TABLES = ("client", "external_review", "internal_review", "client_action")


def upgrade() -> None:
    op.create_table(
        "business",
        sa.Column("id", UUIDColumnType, primary_key=True),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", UTCDateTime, nullable=False),
    )
    op.create_index("ix_business_owner_id", "business", ["owner_id"])

    op.create_table(
        "client",
        sa.Column("id", UUIDColumnType, primary_key=True),
        sa.Column(
            "business_id",
            UUIDColumnType,
            sa.ForeignKey("business.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("sentiment", value_enum(Sentiment, "sentiment"), nullable=True),
        sa.Column("created_at", UTCDateTime, nullable=False),
        sa.Column("deleted_at", UTCDateTime, nullable=True),
    )
    op.create_index("ix_client_business_id", "client", ["business_id"])

    op.create_table(
        "external_review",
        sa.Column("id", UUIDColumnType, primary_key=True),
        sa.Column(
            "business_id",
            UUIDColumnType,
            sa.ForeignKey("business.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("author_name", sa.String(), nullable=True),
        sa.Column("review", sa.Text(), nullable=True),
        sa.Column("stars", StarsColumnType, nullable=True),
        sa.Column("published_at", UTCDateTime, nullable=True),
        sa.Column("linked", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index(
        "ix_external_review_business_linked",
        "external_review",
        ["business_id", "linked"],
    )

    op.create_table(
        "internal_review",
        sa.Column("id", UUIDColumnType, primary_key=True),
        sa.Column(
            "business_id",
            UUIDColumnType,
            sa.ForeignKey("business.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "client_id",
            UUIDColumnType,
            sa.ForeignKey("client.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("review", sa.Text(), nullable=False),
        sa.Column("stars", StarsColumnType, nullable=True),
        sa.Column("happy", sa.Boolean(), nullable=True),
        sa.Column(
            "external_review_id",
            UUIDColumnType,
            sa.ForeignKey("external_review.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", UTCDateTime, nullable=False),
        sa.UniqueConstraint(
            "external_review_id", name="uq_internal_review_external_review_id"
        ),
    )
    op.create_index("ix_internal_review_business_id", "internal_review", ["business_id"])
    op.create_index("ix_internal_review_client_id", "internal_review", ["client_id"])

    op.create_table(
        "client_action",
        sa.Column("id", UUIDColumnType, primary_key=True),
        sa.Column(
            "business_id",
            UUIDColumnType,
            sa.ForeignKey("business.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "client_id",
            UUIDColumnType,
            sa.ForeignKey("client.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("actor_id", sa.String(), nullable=True),
        sa.Column(
            "action", value_enum(ClientActionKind, "client_action_type"), nullable=False
        ),
        sa.Column("meta", sa.JSON(), nullable=False),
        sa.Column("created_at", UTCDateTime, nullable=False),
    )
    op.create_index("ix_client_action_business_id", "client_action", ["business_id"])
    op.create_index("ix_client_action_client_id", "client_action", ["client_id"])

    if op.get_bind().dialect.name == "postgresql":
        _enable_row_level_security()


def _enable_row_level_security() -> None:
    # current_setting(..., true) is NULL when unset, which matches no owner.
    owner_check = f"owner_id = current_setting('{TENANT_SETTING}', true)"
    op.execute("ALTER TABLE business ENABLE ROW LEVEL SECURITY")
    op.execute("ALTER TABLE business FORCE ROW LEVEL SECURITY")
    op.execute(
        f"CREATE POLICY business_owner ON business USING ({owner_check}) WITH CHECK ({owner_check})"
    )
    tenant_check = f"business_id IN (SELECT id FROM business WHERE {owner_check})"
    for table in _TENANT_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
        op.execute(
            f"CREATE POLICY {table}_tenant ON {table} "
            f"USING ({tenant_check}) WITH CHECK ({tenant_check})"
        )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        for table in (*_TENANT_TABLES, "business"):
            policy = "business_owner" if table == "business" else f"{table}_tenant"
            op.execute(f"DROP POLICY IF EXISTS {policy} ON {table}")
            op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")

    op.drop_index("ix_client_action_client_id", table_name="client_action")
    op.drop_index("ix_client_action_business_id", table_name="client_action")
    op.drop_table("client_action")
    op.drop_index("ix_internal_review_client_id", table_name="internal_review")
    op.drop_index("ix_internal_review_business_id", table_name="internal_review")
    op.drop_table("internal_review")
    op.drop_index("ix_external_review_business_linked", table_name="external_review")
    op.drop_table("external_review")
    op.drop_index("ix_client_business_id", table_name="client")
    op.drop_table("client")
    op.drop_index("ix_business_owner_id", table_name="business")
    op.drop_table("business")
