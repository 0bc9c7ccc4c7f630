"""Shapes of the normalized, vendor-agnostic product feed.

Records arrive already validated upstream. They stay plain mappings so the
content hash sees exactly the key order the vendor export produced.
"""

from __future__ import annotations

from typing import Any, Literal, NotRequired, TypedDict

type NormalizedUsage = Literal["optical", "sun", "both"]
type NormalizedCategory = Literal["Frames", "Lenses", "Contacts", "Accessories"]


class NormalizedVendorRef(TypedDict):
    slug: str
    name: NotRequired[str]
    profileId: NotRequired[str]


class NormalizedPrice(TypedDict):
    amount: float
    currency: str


class NormalizedSource(TypedDict, total=False):
    url: str
    retrievedAt: str
    priceList: str
    note: str


class NormalizedPhoto(TypedDict):
    url: str
    label: NotRequired[str]
    isHero: NotRequired[bool]
    source: NotRequired[Literal["catalog", "local"]]
    angle: NotRequired[str]
    colorwayName: NotRequired[str]


class NormalizedColor(TypedDict):
    name: str
    swatch: NotRequired[str]
    finish: NotRequired[str]


class NormalizedVariantBase(TypedDict):
    id: str
    sku: NotRequired[str]
    barcode: NotRequired[str]
    notes: NotRequired[str]
    attributes: NotRequired[dict[str, Any]]


class NormalizedFrameVariant(NormalizedVariantBase):
    type: Literal["frame"]
    sizeLabel: NotRequired[str]
    measurements: NotRequired[dict[str, float]]
    fit: NotRequired[Literal["narrow", "average", "wide", "extra-wide"]]
    usage: NotRequired[NormalizedUsage]
    color: NotRequired[NormalizedColor]
    polarized: NotRequired[bool]
    clipCompatible: NotRequired[bool]


class NormalizedLensVariant(NormalizedVariantBase):
    type: Literal["lens"]
    index: NotRequired[str]
    coating: NotRequired[str]
    diameter: NotRequired[float]
    baseCurve: NotRequired[float]


class NormalizedContactVariant(NormalizedVariantBase):
    type: Literal["contact"]
    power: NotRequired[float]
    cylinder: NotRequired[float]
    axis: NotRequired[float]
    baseCurve: NotRequired[float]
    diameter: NotRequired[float]
    packSize: NotRequired[int]


class NormalizedAccessoryVariant(NormalizedVariantBase):
    type: Literal["accessory"]
    color: NotRequired[NormalizedColor]
    sizeLabel: NotRequired[str]
    packSize: NotRequired[int]


type NormalizedVariant = (
    NormalizedFrameVariant
    | NormalizedLensVariant
    | NormalizedContactVariant
    | NormalizedAccessoryVariant
)


class NormalizedProduct(TypedDict):
    vendor: NormalizedVendorRef
    catalogId: str
    category: NormalizedCategory
    variants: list[NormalizedVariant]
    source: NormalizedSource
    name: NotRequired[str]
    model: NotRequired[str]
    brand: NotRequired[str]
    tags: NotRequired[list[str]]
    collections: NotRequired[list[str]]
    descriptionHtml: NotRequired[str]
    storyHtml: NotRequired[str]
    photos: NotRequired[list[NormalizedPhoto]]
    price: NotRequired[NormalizedPrice]
    extras: NotRequired[dict[str, Any]]
    raw: NotRequired[Any]

