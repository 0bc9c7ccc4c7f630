"""SQLAlchemy mapping metadata for the vendorsync domain model."""

from __future__ import annotations

import logging
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
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from vendorsync.domain.model import (
    Product,
    ProductCategory,
    StoreStock,
    SyncRunStatus,
    VendorCatalogItem,
    VendorSyncRun,
    VendorSyncRunDiff,
    VendorSyncState,
)

log = logging.getLogger(__name__)

ID_LENGTH = 36


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


def _enum_column_type(enum_cls: type[StrEnum]) -> Enum:
    """Store enum values (``"Frames"``, ``"Pending"``) rather than member names."""

    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Catalog tables --------------------------------------------------------------

product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("sku", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("category", _enum_column_type(ProductCategory), nullable=False),
    Column("brand", String, nullable=True),
    Column("model", String, nullable=True),
    Column("color", String, nullable=True),
    Column("size_label", String, nullable=True),
    Column("usage", String, nullable=True),
    Column("catalog_url", String, nullable=True),
    Column("supplier", String, nullable=True),
)

store_stock_table = Table(
    "store_stock",
    mapper_registry.metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column(
        "product_id",
        String(ID_LENGTH),
        ForeignKey("product.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("store_id", String, nullable=False),
    Column("qty", Integer, nullable=False, default=0),
    Column("barcode", String, nullable=True),
    UniqueConstraint("product_id", "store_id"),
)

vendor_catalog_item_table = Table(
    "vendor_catalog_item",
    mapper_registry.metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("vendor", String, nullable=False),
    Column("catalog_id", String, nullable=False),
    Column("payload", JSON, nullable=False),
    Column("hash", String(64), nullable=False),
    UniqueConstraint("vendor", "catalog_id"),
)

# Audit tables ----------------------------------------------------------------

vendor_sync_run_table = Table(
    "vendor_sync_run",
    mapper_registry.metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("vendor", String, nullable=False),
    Column("actor", String, nullable=False),
    Column("status", _enum_column_type(SyncRunStatus), nullable=False),
    Column("dry_run", Boolean, nullable=False, default=False),
    Column("source_path", String, nullable=True),
    Column("hash", String(64), nullable=False, default=""),
    Column("total_items", Integer, nullable=False, default=0),
    Column("created_count", Integer, nullable=True),
    Column("updated_count", Integer, nullable=True),
    Column("unchanged_count", Integer, nullable=True),
    Column("removed_count", Integer, nullable=True),
    Column("started_at", UTCDateTime(), nullable=False),
    Column("finished_at", UTCDateTime(), nullable=True),
    Column("duration_ms", Integer, nullable=True),
    Column("error", Text, nullable=True),
    Index("ix_vendor_sync_run_vendor_started_at", "vendor", "started_at"),
)

vendor_sync_run_diff_table = Table(
    "vendor_sync_run_diff",
    mapper_registry.metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column(
        "run_id",
        String(ID_LENGTH),
        ForeignKey("vendor_sync_run.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("aggregates", JSON, nullable=False),
)

vendor_sync_state_table = Table(
    "vendor_sync_state",
    mapper_registry.metadata,
    Column("vendor", String, primary_key=True),
    Column("total_items", Integer, nullable=False, default=0),
    Column("last_hash", String(64), nullable=True),
    Column("last_source", String, nullable=True),
    Column("last_run_at", UTCDateTime(), nullable=True),
    Column("last_run_by", String, nullable=True),
    Column("last_duration_ms", Integer, nullable=True),
    Column("last_error", Text, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(StoreStock, store_stock_table)

    mapper_registry.map_imperatively(
        Product,
        product_table,
        properties={
            "stocks": relationship(
                StoreStock,
                cascade="all, delete-orphan",
                order_by=store_stock_table.c.store_id,
            ),
        },
    )

    mapper_registry.map_imperatively(VendorCatalogItem, vendor_catalog_item_table)
    mapper_registry.map_imperatively(VendorSyncRun, vendor_sync_run_table)
    mapper_registry.map_imperatively(VendorSyncRunDiff, vendor_sync_run_diff_table)
    mapper_registry.map_imperatively(VendorSyncState, vendor_sync_state_table)

    configure_mappers()
    return mapper_registry
