"""Ledger ORM models: buckets, stocks, stock_transactions."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Double, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blueprint_tracker.infrastructure.database import Base, UtcDateTime


class Bucket(Base):
    """Named allocation bucket.

    The sum of target_percentage across rows is kept at or below 100 by the
    application layer; the database does not enforce it.
    """

    __tablename__ = "buckets"

    bucket_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    target_percentage: Mapped[float] = mapped_column(Double, nullable=False)
    color: Mapped[str] = mapped_column(Text, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)

    # Child rows are removed by ON DELETE CASCADE, not by the ORM.
    stocks: Mapped[list["Stock"]] = relationship(
        back_populates="bucket",
        order_by="Stock.symbol",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Stock(Base):
    """A position within a bucket. Deleted with its bucket."""

    __tablename__ = "stocks"

    stock_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    bucket_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("buckets.bucket_id", ondelete="CASCADE"), nullable=False, index=True
    )
    symbol: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    current_value: Mapped[float] = mapped_column(Double, nullable=False)
    target_percentage: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    shares: Mapped[Optional[float]] = mapped_column(Double, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)

    bucket: Mapped["Bucket"] = relationship(back_populates="stocks")


class StockTransaction(Base):
    """Append-only value-change record.

    stock_id is nulled (not cascaded) when the stock is deleted so the
    symbol-keyed history survives the position.
    """

    __tablename__ = "stock_transactions"

    transaction_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    stock_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("stocks.stock_id", ondelete="SET NULL"), nullable=True, index=True
    )
    symbol: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    amount: Mapped[float] = mapped_column(Double, nullable=False)  # signed
    kind: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False)
