"""Diff engine: compare a vendor feed against the stored catalog.

``compute_diff`` is pure. It never touches storage and never invents stock
rows; it only describes what the apply engine should do.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from vendorsync.domain.model import DiffStatus

from .snapshot import (
    PRODUCT_FIELDS,
    ProductSnapshot,
    catalog_id_from_sku,
    derive_display_fields_from_primary_variant,
    snapshot_from_normalized,
    snapshot_from_product,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from vendorsync.domain.model import Product, StoreStock, VendorCatalogItem
    from vendorsync.domain.normalized import NormalizedProduct


@dataclass(frozen=True, slots=True)
class FieldChange:
    field: str
    before: Any
    after: Any


@dataclass(frozen=True, slots=True)
class StockLevel:
    qty: int
    barcode: str | None


@dataclass(frozen=True, slots=True)
class StockChange:
    store_stock_id: str
    store_id: str
    before: StockLevel
    after: StockLevel
    changed: bool


@dataclass(slots=True, kw_only=True)
class DiffItem:
    catalog_id: str
    catalog_item_id: str | None
    existing_hash: str | None
    hash: str
    normalized: NormalizedProduct
    product_before: ProductSnapshot | None
    product_after: ProductSnapshot
    product_changes: list[FieldChange]
    stock_changes: list[StockChange]
    status: DiffStatus


@dataclass(frozen=True, slots=True)
class RemovedStock:
    store_stock_id: str
    store_id: str
    qty: int
    barcode: str | None


@dataclass(slots=True, kw_only=True)
class RemovedItem:
    """Stored product absent from the feed. Its stocks get zeroed; nothing is deleted."""

    catalog_id: str
    catalog_item_id: str | None
    product_id: str | None
    sku: str | None
    stocks: list[RemovedStock] = field(default_factory=list["RemovedStock"])


@dataclass(frozen=True, slots=True)
class DiffCounts:
    total: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    removed: int = 0


@dataclass(slots=True, kw_only=True)
class DiffResult:
    vendor: str
    hash: str
    counts: DiffCounts
    items: list[DiffItem]
    removed: list[RemovedItem]


def hash_normalized_product(record: NormalizedProduct) -> str:
    """SHA-256 of the compact JSON form of ``record``.

    Key order is taken as given; two records that differ only in key order hash
    differently.
    """

    payload = json.dumps(record, separators=(",", ":"), ensure_ascii=False)
    # Lone surrogates are hashed as their \uXXXX escape text.
    return hashlib.sha256(payload.encode("utf-8", "backslashreplace")).hexdigest()


def aggregate_hash(entries: Iterable[tuple[str, str]]) -> str:
    """Order-independent digest over ``(catalog_id, item_hash)`` pairs; ``""`` when empty."""

    ordered = sorted(entries, key=lambda entry: entry[0])
    if not ordered:
        return ""
    digest = hashlib.sha256()
    for catalog_id, item_hash in ordered:
        digest.update(f"{catalog_id}:{item_hash}|".encode())
    return digest.hexdigest()


def diff_product_snapshots(
    before: ProductSnapshot | None, after: ProductSnapshot
) -> list[FieldChange]:
    if before is None:
        return []
    changes: list[FieldChange] = []
    for name in PRODUCT_FIELDS:
        before_value = getattr(before, name)
        after_value = getattr(after, name)
        if before_value != after_value:
            changes.append(FieldChange(field=name, before=before_value, after=after_value))
    return changes


def build_stock_changes(
    record: NormalizedProduct, stocks: Sequence[StoreStock]
) -> list[StockChange]:
    """Target every existing stock at qty = variant count, barcode = primary variant barcode."""

    if not stocks:
        return []
    target = StockLevel(
        qty=len(record["variants"]),
        barcode=derive_display_fields_from_primary_variant(record).barcode,
    )
    changes: list[StockChange] = []
    for stock in stocks:
        before = StockLevel(qty=stock.qty, barcode=stock.barcode)
        changes.append(
            StockChange(
                store_stock_id=stock.id,
                store_id=stock.store_id,
                before=before,
                after=target,
                changed=before != target,
            )
        )
    return changes


def _classify(
    product: Product | None,
    product_changes: list[FieldChange],
    stock_changes: list[StockChange],
    existing_hash: str | None,
    new_hash: str,
) -> DiffStatus:
    if product is None:
        return DiffStatus.NEW
    if (
        not product_changes
        and not any(change.changed for change in stock_changes)
        and existing_hash == new_hash
    ):
        return DiffStatus.UNCHANGED
    return DiffStatus.UPDATED


def compute_diff(
    vendor: str,
    normalized: Sequence[NormalizedProduct],
    existing_catalog_items: Iterable[VendorCatalogItem],
    existing_products: Iterable[Product],
) -> DiffResult:
    """Compare ``normalized`` feed records against stored state for ``vendor``."""

    catalog_items_by_id: dict[str, VendorCatalogItem] = {}
    for catalog_item in existing_catalog_items:
        catalog_items_by_id[catalog_item.catalog_id] = catalog_item

    products_by_catalog_id: dict[str, Product] = {}
    for product in existing_products:
        catalog_id = catalog_id_from_sku(vendor, product.sku)
        if catalog_id is None:
            continue
        products_by_catalog_id[catalog_id] = product

    items: list[DiffItem] = []
    seen: set[str] = set()

    for record in normalized:
        catalog_id = record["catalogId"]
        seen.add(catalog_id)

        catalog_item = catalog_items_by_id.get(catalog_id)
        product = products_by_catalog_id.get(catalog_id)
        existing_hash = catalog_item.hash if catalog_item is not None else None

        product_after = snapshot_from_normalized(vendor, record)
        product_before: ProductSnapshot | None = None
        if product is not None:
            product_after.id = product.id
            product_before = snapshot_from_product(product)

        product_changes = diff_product_snapshots(product_before, product_after)
        stock_changes = build_stock_changes(record, product.stocks if product else [])
        new_hash = hash_normalized_product(record)

        items.append(
            DiffItem(
                catalog_id=catalog_id,
                catalog_item_id=catalog_item.id if catalog_item is not None else None,
                existing_hash=existing_hash,
                hash=new_hash,
                normalized=record,
                product_before=product_before,
                product_after=product_after,
                product_changes=product_changes,
                stock_changes=stock_changes,
                status=_classify(product, product_changes, stock_changes, existing_hash, new_hash),
            )
        )

    removed: list[RemovedItem] = []
    for catalog_id, product in products_by_catalog_id.items():
        if catalog_id in seen:
            continue
        catalog_item = catalog_items_by_id.get(catalog_id)
        removed.append(
            RemovedItem(
                catalog_id=catalog_id,
                catalog_item_id=catalog_item.id if catalog_item is not None else None,
                product_id=product.id,
                sku=product.sku,
                stocks=[
                    RemovedStock(
                        store_stock_id=stock.id,
                        store_id=stock.store_id,
                        qty=stock.qty,
                        barcode=stock.barcode,
                    )
                    for stock in product.stocks
                ],
            )
        )

    counts = DiffCounts(
        total=len(normalized),
        created=sum(1 for item in items if item.status is DiffStatus.NEW),
        updated=sum(1 for item in items if item.status is DiffStatus.UPDATED),
        unchanged=sum(1 for item in items if item.status is DiffStatus.UNCHANGED),
        removed=len(removed),
    )

    return DiffResult(
        vendor=vendor,
        hash=aggregate_hash((item.catalog_id, item.hash) for item in items),
        counts=counts,
        items=items,
        removed=removed,
    )
