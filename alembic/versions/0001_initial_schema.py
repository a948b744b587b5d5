"""Initial schema — ledger and snapshot tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ------------------------------------------------------------------ #
    # 1. LEDGER                                                            #
    # ------------------------------------------------------------------ #

    op.create_table(
        "buckets",
        sa.Column("bucket_id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("target_percentage", sa.Double, nullable=False),
        sa.Column("color", sa.Text, nullable=False),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "stocks",
        sa.Column("stock_id", sa.Uuid, primary_key=True),
        sa.Column(
            "bucket_id",
            sa.Uuid,
            sa.ForeignKey("buckets.bucket_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("symbol", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("current_value", sa.Double, nullable=False),
        sa.Column("target_percentage", sa.Double, nullable=False, server_default="0"),
        sa.Column("shares", sa.Double, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_stocks_bucket_id", "stocks", ["bucket_id"])

    op.create_table(
        "stock_transactions",
        sa.Column("transaction_id", sa.Uuid, primary_key=True),
        sa.Column(
            "stock_id",
            sa.Uuid,
            sa.ForeignKey("stocks.stock_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("symbol", sa.Text, nullable=False),
        sa.Column("amount", sa.Double, nullable=False),
        sa.Column("kind", sa.Text, nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_stock_transactions_stock_id", "stock_transactions", ["stock_id"])
    op.create_index("ix_stock_transactions_symbol", "stock_transactions", ["symbol"])

    # ------------------------------------------------------------------ #
    # 2. SNAPSHOTS                                                         #
    # ------------------------------------------------------------------ #

    op.create_table(
        "portfolio_snapshots",
        sa.Column("snapshot_id", sa.Uuid, primary_key=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_value", sa.Double, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
    )
    op.create_index("ix_portfolio_snapshots_timestamp", "portfolio_snapshots", ["timestamp"])

    op.create_table(
        "bucket_snapshots",
        sa.Column("bucket_snapshot_id", sa.Uuid, primary_key=True),
        sa.Column(
            "snapshot_id",
            sa.Uuid,
            sa.ForeignKey("portfolio_snapshots.snapshot_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "bucket_id",
            sa.Uuid,
            sa.ForeignKey("buckets.bucket_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("total_value", sa.Double, nullable=False),
        sa.Column("actual_percentage", sa.Double, nullable=False),
        sa.Column("target_percentage", sa.Double, nullable=False),
    )
    op.create_index("ix_bucket_snapshots_snapshot_id", "bucket_snapshots", ["snapshot_id"])
    op.create_index("ix_bucket_snapshots_bucket_id", "bucket_snapshots", ["bucket_id"])


def downgrade() -> None:
    op.drop_table("bucket_snapshots")
    op.drop_table("portfolio_snapshots")
    op.drop_table("stock_transactions")
    op.drop_table("stocks")
    op.drop_table("buckets")
