from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError

from vendorsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogSyncUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from vendorsync.domain.errors import TransactionDroppedError
from vendorsync.domain.model import Product, VendorSyncRun

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def _dropped(message: str = "server closed the connection") -> DBAPIError:
    return DBAPIError(
        "COMMIT", None, Exception(message), connection_invalidated=True
    )


def test_unit_of_work_requires_startup() -> None:
    assert is_started() is False
    with pytest.raises(StartupError):
        SqlAlchemyCatalogSyncUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started() is True


def test_unit_of_work_commits_across_sessions(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyCatalogSyncUnitOfWork() as uow:
        product = Product(sku="acme:A1", name="Aviator")
        product.add_stock("store-1", qty=1)
        uow.repositories.products.add(product)
        uow.commit()

    with SqlAlchemyCatalogSyncUnitOfWork() as uow:
        [loaded] = uow.repositories.products.list_for_vendor("acme")
        assert loaded.name == "Aviator"
        assert [stock.qty for stock in loaded.stocks] == [1]


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyCatalogSyncUnitOfWork() as uow:
        uow.repositories.sync_runs.add(
            VendorSyncRun(vendor="acme", actor="svc", started_at=datetime.now(tz=UTC))
        )
        uow.session.flush()
        raise RuntimeError("boom")

    with SqlAlchemyCatalogSyncUnitOfWork() as uow:
        assert uow.repositories.sync_runs.count_for_vendor("acme") == 0


def test_commit_translates_invalidated_connection(
    sqlite_engine: Engine, monkeypatch: pytest.MonkeyPatch
) -> None:
    startup(engine=sqlite_engine, force=True)

    def dropped_commit() -> None:
        raise _dropped()

    with pytest.raises(TransactionDroppedError) as excinfo:  # noqa: PT012
        with SqlAlchemyCatalogSyncUnitOfWork() as uow:
            monkeypatch.setattr(uow.session, "commit", dropped_commit)
            uow.commit()

    assert isinstance(excinfo.value.__cause__, DBAPIError)


def test_commit_keeps_other_driver_errors(
    sqlite_engine: Engine, monkeypatch: pytest.MonkeyPatch
) -> None:
    startup(engine=sqlite_engine, force=True)

    def failing_commit() -> None:
        raise DBAPIError("COMMIT", None, Exception("disk full"))

    with pytest.raises(DBAPIError) as excinfo:  # noqa: PT012
        with SqlAlchemyCatalogSyncUnitOfWork() as uow:
            monkeypatch.setattr(uow.session, "commit", failing_commit)
            uow.commit()

    assert not isinstance(excinfo.value, TransactionDroppedError)


def test_exit_translates_invalidated_connection(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(TransactionDroppedError):  # noqa: PT012
        with SqlAlchemyCatalogSyncUnitOfWork():
            raise _dropped()
