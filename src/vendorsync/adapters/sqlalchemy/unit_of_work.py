"""SQLAlchemy-backed unit of work for vendor catalog synchronisation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, sessionmaker

from vendorsync.adapters.sqlalchemy.mappings import start_mappers
from vendorsync.adapters.sqlalchemy.migrations import upgrade_head
from vendorsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyCatalogItemRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyStoreStockRepository,
    SqlAlchemySyncRunDiffRepository,
    SqlAlchemySyncRunRepository,
    SqlAlchemySyncStateRepository,
)
from vendorsync.config import get_database_uri
from vendorsync.domain.errors import TransactionDroppedError
from vendorsync.domain.ports.unit_of_work import CatalogSyncRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call vendorsync.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, migrate the schema and build the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


def _is_dropped_transaction(exc: BaseException | None) -> bool:
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    The session is the interactive transaction. Driver errors that invalidated
    the connection surface as ``TransactionDroppedError``.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        if _is_dropped_transaction(exc_value):
            raise TransactionDroppedError(str(exc_value)) from exc_value
        return False

    def commit(self) -> None:
        try:
            self.session.commit()
        except DBAPIError as exc:
            if exc.connection_invalidated:
                raise TransactionDroppedError(str(exc)) from exc
            raise

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyCatalogSyncUnitOfWork(BaseSqlAlchemyUnitOfWork[CatalogSyncRepositories]):
    """Unit of work managing SQLAlchemy sessions for catalog sync runs."""

    def _build_repositories(self, session: Session) -> CatalogSyncRepositories:
        return CatalogSyncRepositories(
            products=SqlAlchemyProductRepository(session),
            catalog_items=SqlAlchemyCatalogItemRepository(session),
            store_stocks=SqlAlchemyStoreStockRepository(session),
            sync_runs=SqlAlchemySyncRunRepository(session),
            sync_run_diffs=SqlAlchemySyncRunDiffRepository(session),
            sync_states=SqlAlchemySyncStateRepository(session),
        )


if TYPE_CHECKING:
    from vendorsync.domain.ports.unit_of_work import CatalogSyncUnitOfWork

    _uow_check: CatalogSyncUnitOfWork = SqlAlchemyCatalogSyncUnitOfWork()
