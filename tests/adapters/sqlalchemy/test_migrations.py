from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import inspect, text

from reviewlink.adapters.sqlalchemy import mapper_registry
from reviewlink.adapters.sqlalchemy.migrations import MIGRATIONS_PATH, build_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_build_config_points_at_bundled_scripts() -> None:
    config = build_config()

    script_location = config.get_main_option("script_location")
    assert script_location is not None
    assert script_location.rstrip("/").endswith("migrations")
    assert (MIGRATIONS_PATH / "versions").is_dir()


def test_upgrade_head_creates_mapped_schema(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    tables = set(inspector.get_table_names())
    assert set(mapper_registry.metadata.tables) <= tables
    assert "alembic_version" in tables

    unique = inspector.get_unique_constraints("internal_review")
    assert unique[0]["name"] == "uq_internal_review_external_review_id"
    assert unique[0]["column_names"] == ["external_review_id"]

    with sqlite_engine.connect() as connection:
        version = connection.execute(text("SELECT version_num FROM alembic_version")).scalar_one()
    assert version == "0001_initial_schema"


def test_upgrade_head_indexes_tenant_columns(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    client_indexes = {index["name"] for index in inspector.get_indexes("client")}
    review_indexes = {index["name"] for index in inspector.get_indexes("external_review")}

    assert "ix_client_business_id" in client_indexes
    assert "ix_external_review_business_linked" in review_indexes
