"""SQLAlchemy-backed database lifecycle and tenant-bound transactions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from reviewlink.adapters.sqlalchemy.mappings import start_mappers
from reviewlink.adapters.sqlalchemy.migrations import upgrade_head
from reviewlink.adapters.sqlalchemy.repositories import (
    SqlAlchemyBusinessRepository,
    SqlAlchemyClientActionRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyExternalReviewRepository,
    SqlAlchemyInternalReviewRepository,
)
from reviewlink.adapters.sqlalchemy.tenancy import bind_identity
from reviewlink.config import get_database_config
from reviewlink.domain.errors import StorageWriteError
from reviewlink.domain.ports.unit_of_work import ReconciliationRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from reviewlink.config import DatabaseConfig
    from reviewlink.domain.model import CallerIdentity

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the database is used before initialisation or after disposal."""


def create_database_engine(config: DatabaseConfig) -> Engine:
    """Create the engine and its bounded connection pool."""

    options: dict[str, Any] = {"future": True, "pool_pre_ping": True}
    if make_url(config.uri).get_backend_name() != "sqlite":
        options["pool_size"] = config.pool_size
    return create_engine(config.uri, **options)


@dataclass(slots=True)
class SqlAlchemyDatabase:
    """Owns the engine (and so the connection pool) for the process lifetime.

    Created once by :func:`startup` and handed to the services that need it;
    :meth:`transaction` is the only way to obtain a session.
    """

    engine: Engine
    session_factory: sessionmaker[Session]
    _disposed: bool = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def transaction(self, identity: CallerIdentity) -> SqlAlchemyTenantTransaction:
        if self._disposed:
            raise StartupError("Database has been disposed; call startup() again.")
        return SqlAlchemyTenantTransaction(self.session_factory, identity)

    def dispose(self) -> None:
        """Close every pooled connection (primarily for shutdown and tests)."""

        self.engine.dispose()
        self._disposed = True


def startup(
    *,
    engine: Engine | None = None,
    database: DatabaseConfig | None = None,
    migrate: bool = True,
) -> SqlAlchemyDatabase:
    """Initialise mappers, the engine, and (optionally) the schema."""

    resolved_engine = engine or create_database_engine(database or get_database_config())
    start_mappers()
    if migrate:
        upgrade_head(engine=resolved_engine)
    log.info("Database ready: %s", resolved_engine.url.render_as_string(hide_password=True))
    return SqlAlchemyDatabase(
        engine=resolved_engine,
        session_factory=sessionmaker(bind=resolved_engine, expire_on_commit=False),
    )


class SqlAlchemyTenantTransaction:
    """One session, one transaction, bound to one caller identity.

    Storage exceptions escaping the block are re-raised as
    :class:`StorageWriteError` after the rollback.
    """

    def __init__(self, session_factory: sessionmaker[Session], identity: CallerIdentity) -> None:
        self.session_factory = session_factory
        self._identity = identity
        self._session: Session | None = None
        self._repositories: ReconciliationRepositories | None = None

    @property
    def identity(self) -> CallerIdentity:
        return self._identity

    def __enter__(self) -> SqlAlchemyTenantTransaction:
        if self._session is not None:
            raise StartupError("Transaction already entered")
        session = self.session_factory()
        try:
            bind_identity(session, self._identity)
        except SQLAlchemyError as exc:
            session.close()
            raise StorageWriteError from exc
        self._session = session
        self._repositories = self._build_repositories(session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                self._rollback_quietly(session)
        finally:
            session.close()
            self._session = None
            self._repositories = None
        if isinstance(exc_value, SQLAlchemyError):
            raise StorageWriteError from exc_value
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> ReconciliationRepositories:
        if self._repositories is None:
            raise StartupError("Transaction not entered")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Transaction not entered")
        return self._session

    def _build_repositories(self, session: Session) -> ReconciliationRepositories:
        return ReconciliationRepositories(
            businesses=SqlAlchemyBusinessRepository(session, self._identity),
            clients=SqlAlchemyClientRepository(session, self._identity),
            external_reviews=SqlAlchemyExternalReviewRepository(session, self._identity),
            internal_reviews=SqlAlchemyInternalReviewRepository(session, self._identity),
            client_actions=SqlAlchemyClientActionRepository(session, self._identity),
        )

    @staticmethod
    def _rollback_quietly(session: Session) -> None:
        try:
            session.rollback()
        except SQLAlchemyError:
            log.warning("Rollback failed", exc_info=True)


if TYPE_CHECKING:
    from reviewlink.domain.ports.unit_of_work import TenantTransaction, TransactionFactory

    _database_stub: SqlAlchemyDatabase
    _tx_check: TenantTransaction = _database_stub.transaction(CallerIdentity(user_id="x"))
    _factory_check: TransactionFactory = _database_stub.transaction
