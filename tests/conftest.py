from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from reviewlink.adapters.sqlalchemy import start_mappers
from reviewlink.adapters.sqlalchemy.migrations import upgrade_head
from reviewlink.adapters.sqlalchemy.unit_of_work import SqlAlchemyDatabase, startup
from reviewlink.domain.model import CallerIdentity
from tests.helpers.reconciliation import TenantStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # One shared connection so every session (and worker thread) sees the same in-memory database.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def database(sqlite_engine: Engine) -> Iterator[SqlAlchemyDatabase]:
    db = startup(engine=sqlite_engine, migrate=False)
    try:
        yield db
    finally:
        if not db.disposed:
            db.dispose()


@pytest.fixture
def tenant_store() -> TenantStore:
    return TenantStore()


@pytest.fixture
def owner_a() -> CallerIdentity:
    return CallerIdentity(user_id="owner-a")


@pytest.fixture
def owner_b() -> CallerIdentity:
    return CallerIdentity(user_id="owner-b")
