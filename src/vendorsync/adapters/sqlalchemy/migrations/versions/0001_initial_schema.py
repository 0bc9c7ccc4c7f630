"""Initial catalog and sync audit schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-11-03 09:12:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "product",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("sku", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("brand", sa.String(), nullable=True),
        sa.Column("model", sa.String(), nullable=True),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column("size_label", sa.String(), nullable=True),
        sa.Column("usage", sa.String(), nullable=True),
        sa.Column("catalog_url", sa.String(), nullable=True),
        sa.Column("supplier", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_product"),
        sa.UniqueConstraint("sku", name="uq_product_sku"),
    )
    op.create_table(
        "store_stock",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("product_id", sa.String(36), nullable=False),
        sa.Column("store_id", sa.String(), nullable=False),
        sa.Column("qty", sa.Integer(), nullable=False),
        sa.Column("barcode", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name="fk_store_stock_product_id_product",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_store_stock"),
        sa.UniqueConstraint("product_id", "store_id", name="uq_store_stock_product_id"),
    )
    op.create_table(
        "vendor_catalog_item",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("vendor", sa.String(), nullable=False),
        sa.Column("catalog_id", sa.String(), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("hash", sa.String(64), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_vendor_catalog_item"),
        sa.UniqueConstraint("vendor", "catalog_id", name="uq_vendor_catalog_item_vendor"),
    )
    op.create_table(
        "vendor_sync_run",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("vendor", sa.String(), nullable=False),
        sa.Column("actor", sa.String(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("dry_run", sa.Boolean(), nullable=False),
        sa.Column("source_path", sa.String(), nullable=True),
        sa.Column("hash", sa.String(64), nullable=False),
        sa.Column("total_items", sa.Integer(), nullable=False),
        sa.Column("created_count", sa.Integer(), nullable=True),
        sa.Column("updated_count", sa.Integer(), nullable=True),
        sa.Column("unchanged_count", sa.Integer(), nullable=True),
        sa.Column("removed_count", sa.Integer(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_ms", sa.Integer(), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_vendor_sync_run"),
    )
    op.create_index(
        "ix_vendor_sync_run_vendor_started_at",
        "vendor_sync_run",
        ["vendor", "started_at"],
    )
    op.create_table(
        "vendor_sync_run_diff",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("run_id", sa.String(36), nullable=False),
        sa.Column("aggregates", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(
            ["run_id"],
            ["vendor_sync_run.id"],
            name="fk_vendor_sync_run_diff_run_id_vendor_sync_run",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_vendor_sync_run_diff"),
        sa.UniqueConstraint("run_id", name="uq_vendor_sync_run_diff_run_id"),
    )
    op.create_table(
        "vendor_sync_state",
        sa.Column("vendor", sa.String(), nullable=False),
        sa.Column("total_items", sa.Integer(), nullable=False),
        sa.Column("last_hash", sa.String(64), nullable=True),
        sa.Column("last_source", sa.String(), nullable=True),
        sa.Column("last_run_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_run_by", sa.String(), nullable=True),
        sa.Column("last_duration_ms", sa.Integer(), nullable=True),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("vendor", name="pk_vendor_sync_state"),
    )


def downgrade() -> None:
    op.drop_table("vendor_sync_state")
    op.drop_table("vendor_sync_run_diff")
    op.drop_index("ix_vendor_sync_run_vendor_started_at", table_name="vendor_sync_run")
    op.drop_table("vendor_sync_run")
    op.drop_table("vendor_catalog_item")
    op.drop_table("store_stock")
    op.drop_table("product")
