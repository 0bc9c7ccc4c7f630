"""Stored catalog entities: products, their per-store stock and raw vendor rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from vendorsync.domain.model.base import Entity
from vendorsync.domain.model.enums import ProductCategory


@dataclass(eq=False, kw_only=True)
class StoreStock(Entity):
    """Quantity and barcode of one product in one store."""

    store_id: str
    product_id: str | None = None
    qty: int = 0
    barcode: str | None = None


@dataclass(eq=False, kw_only=True)
class Product(Entity):
    """A retail product. Vendor-sourced products carry a ``"<vendor>:<catalogId>"`` SKU."""

    sku: str
    name: str
    category: ProductCategory = ProductCategory.ACCESSORIES
    brand: str | None = None
    model: str | None = None
    color: str | None = None
    size_label: str | None = None
    usage: str | None = None
    catalog_url: str | None = None
    supplier: str | None = None

    stocks: list[StoreStock] = field(default_factory=list["StoreStock"], repr=False)

    def add_stock(self, store_id: str, *, qty: int = 0, barcode: str | None = None) -> StoreStock:
        stock = StoreStock(store_id=store_id, product_id=self.id, qty=qty, barcode=barcode)
        self.stocks.append(stock)
        return stock


@dataclass(eq=False, kw_only=True)
class VendorCatalogItem(Entity):
    """Last applied vendor payload for one catalog id, with its content hash."""

    vendor: str
    catalog_id: str
    payload: dict[str, Any] = field(default_factory=dict[str, Any], repr=False)
    hash: str
