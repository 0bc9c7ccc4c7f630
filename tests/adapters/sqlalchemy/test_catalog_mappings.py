from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, inspect, select

from vendorsync.adapters.sqlalchemy import mapper_registry, start_mappers
from vendorsync.adapters.sqlalchemy.mappings import store_stock_table
from vendorsync.domain.model import Product

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def test_start_mappers_is_idempotent() -> None:
    # First invocation happens in the sqlite_engine fixture; calling again should be harmless.
    assert start_mappers() is start_mappers()


def test_migrations_create_mapped_tables(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)
    table_names = set(inspector.get_table_names())

    assert set(mapper_registry.metadata.tables) <= table_names
    for table in mapper_registry.metadata.sorted_tables:
        migrated = {column["name"] for column in inspector.get_columns(table.name)}
        assert migrated == set(table.columns.keys()), table.name

    indexes = {index["name"] for index in inspector.get_indexes("vendor_sync_run")}
    assert "ix_vendor_sync_run_vendor_started_at" in indexes


def test_dropping_a_stock_from_product_deletes_it(sqlite_session: Session) -> None:
    product = Product(sku="acme:A1", name="Aviator")
    product.add_stock("store-1", qty=1)
    product.add_stock("store-2", qty=2)
    sqlite_session.add(product)
    sqlite_session.commit()

    product.stocks.pop(0)
    sqlite_session.commit()

    remaining = sqlite_session.execute(
        select(func.count()).select_from(store_stock_table)
    ).scalar_one()
    assert remaining == 1
