"""Diff and apply engines for vendor catalog synchronisation."""

from __future__ import annotations

from .apply import (
    ApplyContext,
    ApplyEngineResult,
    TransactionPolicy,
    UnitOfWorkFactory,
    WriteMode,
    apply_writes,
    execute_apply,
)
from .diff import (
    DiffCounts,
    DiffItem,
    DiffResult,
    FieldChange,
    RemovedItem,
    RemovedStock,
    StockChange,
    StockLevel,
    aggregate_hash,
    compute_diff,
    hash_normalized_product,
)
from .snapshot import (
    PRODUCT_FIELDS,
    PrimaryVariantFields,
    ProductSnapshot,
    build_sku,
    catalog_id_from_sku,
    derive_display_fields_from_primary_variant,
)
from .summary import (
    DEFAULT_DIFF_SAMPLE_LIMIT,
    RunPage,
    RunView,
    SyncSummary,
    build_diff_aggregates,
    build_run_page,
    build_run_view,
)

__all__ = [
    "DEFAULT_DIFF_SAMPLE_LIMIT",
    "PRODUCT_FIELDS",
    "ApplyContext",
    "ApplyEngineResult",
    "DiffCounts",
    "DiffItem",
    "DiffResult",
    "FieldChange",
    "PrimaryVariantFields",
    "ProductSnapshot",
    "RemovedItem",
    "RemovedStock",
    "RunPage",
    "RunView",
    "StockChange",
    "StockLevel",
    "SyncSummary",
    "TransactionPolicy",
    "UnitOfWorkFactory",
    "WriteMode",
    "aggregate_hash",
    "apply_writes",
    "build_diff_aggregates",
    "build_run_page",
    "build_run_view",
    "build_sku",
    "catalog_id_from_sku",
    "compute_diff",
    "derive_display_fields_from_primary_variant",
    "execute_apply",
    "hash_normalized_product",
]
