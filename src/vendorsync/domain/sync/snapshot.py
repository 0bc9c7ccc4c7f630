"""Comparable product snapshots and the mapping rules that derive them.

A snapshot is the flat view the diff engine compares field by field. Stored
products and incoming feed records are both projected onto it, so every
derivation rule for a feed record lives here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, cast

from vendorsync.domain.model import ProductCategory

if TYPE_CHECKING:
    from collections.abc import Mapping

    from vendorsync.domain.model import Product
    from vendorsync.domain.normalized import NormalizedProduct

PRODUCT_FIELDS: Final[tuple[str, ...]] = (
    "sku",
    "name",
    "category",
    "brand",
    "model",
    "color",
    "size_label",
    "usage",
    "catalog_url",
    "supplier",
)


@dataclass(slots=True, kw_only=True)
class ProductSnapshot:
    """Materialized comparable view of a product; ``id=None`` means not created yet."""

    id: str | None
    sku: str
    name: str
    category: ProductCategory
    brand: str | None
    model: str | None
    color: str | None
    size_label: str | None
    usage: str | None
    catalog_url: str | None
    supplier: str | None

    def product_data(self) -> dict[str, Any]:
        """Field values to write onto a stored ``Product``."""

        return {name: getattr(self, name) for name in PRODUCT_FIELDS}


@dataclass(frozen=True, slots=True)
class PrimaryVariantFields:
    color: str | None = None
    size_label: str | None = None
    usage: str | None = None
    barcode: str | None = None


def clean_string(value: object) -> str | None:
    """Return the stripped string, or ``None`` for non-strings and blanks."""

    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def derive_display_fields_from_primary_variant(
    record: NormalizedProduct,
) -> PrimaryVariantFields:
    """Read color, size label, usage and barcode from ``variants[0]`` only.

    Products are stored one row per catalog id, so the first variant stands in
    for the whole product. Later variants only count towards stock quantity.
    """

    variants = record.get("variants") or []
    if not variants:
        return PrimaryVariantFields()
    primary = cast("Mapping[str, Any]", variants[0])
    color = primary.get("color")
    color_name = cast("Mapping[str, Any]", color).get("name") if isinstance(color, dict) else None
    return PrimaryVariantFields(
        color=clean_string(color_name),
        size_label=clean_string(primary.get("sizeLabel")),
        usage=clean_string(primary.get("usage")),
        barcode=clean_string(primary.get("barcode")),
    )


def build_sku(vendor: str, catalog_id: str) -> str:
    trimmed_catalog_id = catalog_id.strip()
    trimmed_vendor = vendor.strip()
    if not trimmed_vendor:
        return trimmed_catalog_id
    return f"{trimmed_vendor}:{trimmed_catalog_id}"


def catalog_id_from_sku(vendor: str, sku: str | None) -> str | None:
    """Strip the ``"<vendor>:"`` prefix from a SKU; unprefixed SKUs are used verbatim."""

    if not sku:
        return None
    normalized = sku.strip()
    if not normalized:
        return None
    prefix = f"{vendor}:"
    if normalized.startswith(prefix):
        return normalized.removeprefix(prefix)
    return normalized


def to_product_category(value: str) -> ProductCategory:
    try:
        return ProductCategory(value)
    except ValueError:
        return ProductCategory.ACCESSORIES


def snapshot_from_normalized(vendor: str, record: NormalizedProduct) -> ProductSnapshot:
    vendor_ref = cast("Mapping[str, Any]", record.get("vendor") or {})
    vendor_name = clean_string(vendor_ref.get("name"))
    # records injected without a vendor ref fall back to the run's vendor slug
    vendor_label = vendor_name or clean_string(vendor_ref.get("slug")) or vendor
    source = cast("Mapping[str, Any]", record.get("source") or {})
    primary = derive_display_fields_from_primary_variant(record)
    catalog_id = record["catalogId"]
    return ProductSnapshot(
        id=None,
        sku=build_sku(vendor, catalog_id),
        name=clean_string(record.get("name")) or clean_string(record.get("model")) or catalog_id,
        category=to_product_category(record.get("category", "")),
        brand=clean_string(record.get("brand")) or vendor_label,
        model=clean_string(record.get("model")),
        color=primary.color,
        size_label=primary.size_label,
        usage=primary.usage,
        catalog_url=clean_string(source.get("url")),
        supplier=vendor_label,
    )


def snapshot_from_product(product: Product) -> ProductSnapshot:
    return ProductSnapshot(
        id=product.id,
        sku=product.sku,
        name=product.name,
        category=product.category,
        brand=product.brand,
        model=product.model,
        color=product.color,
        size_label=product.size_label,
        usage=product.usage,
        catalog_url=product.catalog_url,
        supplier=product.supplier,
    )
