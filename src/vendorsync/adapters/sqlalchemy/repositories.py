"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from vendorsync.adapters.sqlalchemy.mappings import (
    product_table,
    vendor_catalog_item_table,
    vendor_sync_run_diff_table,
    vendor_sync_run_table,
    vendor_sync_state_table,
)
from vendorsync.domain.model import (
    Product,
    StoreStock,
    VendorCatalogItem,
    VendorSyncRun,
    VendorSyncRunDiff,
    VendorSyncState,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute, Session


class SqlAlchemyProductRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Product) -> None:
        self.session.add(entity)

    def get(self, product_id: str) -> Product | None:
        return self.session.get(Product, product_id)

    def list_for_vendor(self, vendor: str) -> list[Product]:
        stocks = cast("InstrumentedAttribute[list[StoreStock]]", Product.stocks)
        stmt = (
            select(Product)
            .where(product_table.c.sku.startswith(f"{vendor}:", autoescape=True))
            .options(selectinload(stocks))
            .order_by(product_table.c.sku)
        )
        return list(self.session.scalars(stmt))


class SqlAlchemyCatalogItemRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: VendorCatalogItem) -> None:
        self.session.add(entity)

    def get(self, item_id: str) -> VendorCatalogItem | None:
        return self.session.get(VendorCatalogItem, item_id)

    def list_for_vendor(self, vendor: str) -> list[VendorCatalogItem]:
        stmt = (
            select(VendorCatalogItem)
            .where(vendor_catalog_item_table.c.vendor == vendor)
            .order_by(vendor_catalog_item_table.c.catalog_id)
        )
        return list(self.session.scalars(stmt))


class SqlAlchemyStoreStockRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: StoreStock) -> None:
        self.session.add(entity)

    def get(self, stock_id: str) -> StoreStock | None:
        return self.session.get(StoreStock, stock_id)


class SqlAlchemySyncRunRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: VendorSyncRun) -> None:
        self.session.add(entity)

    def get(self, run_id: str) -> VendorSyncRun | None:
        return self.session.get(VendorSyncRun, run_id)

    def list_for_vendor(
        self, vendor: str | None, *, limit: int, offset: int = 0
    ) -> list[VendorSyncRun]:
        stmt = select(VendorSyncRun)
        if vendor is not None:
            stmt = stmt.where(vendor_sync_run_table.c.vendor == vendor)
        stmt = (
            stmt.order_by(vendor_sync_run_table.c.started_at.desc(), vendor_sync_run_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.scalars(stmt))

    def count_for_vendor(self, vendor: str | None) -> int:
        stmt = select(func.count()).select_from(vendor_sync_run_table)
        if vendor is not None:
            stmt = stmt.where(vendor_sync_run_table.c.vendor == vendor)
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemySyncRunDiffRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: VendorSyncRunDiff) -> None:
        self.session.add(entity)

    def get_by_run_id(self, run_id: str) -> VendorSyncRunDiff | None:
        stmt = select(VendorSyncRunDiff).where(vendor_sync_run_diff_table.c.run_id == run_id)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemySyncStateRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: VendorSyncState) -> None:
        self.session.add(entity)

    def get(self, vendor: str) -> VendorSyncState | None:
        return self.session.get(VendorSyncState, vendor)

    def list_all(self) -> list[VendorSyncState]:
        stmt = select(VendorSyncState).order_by(vendor_sync_state_table.c.vendor)
        return list(self.session.scalars(stmt))
