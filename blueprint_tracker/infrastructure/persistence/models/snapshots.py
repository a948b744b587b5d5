"""Snapshot ORM models: portfolio_snapshots, bucket_snapshots."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Double, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blueprint_tracker.infrastructure.database import Base, UtcDateTime


class PortfolioSnapshot(Base):
    """Point-in-time capture of the whole portfolio.

    Retention purges delete by timestamp; bucket rows follow via ON DELETE CASCADE.
    """

    __tablename__ = "portfolio_snapshots"

    snapshot_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    timestamp: Mapped[datetime] = mapped_column(UtcDateTime, nullable=False, index=True)
    total_value: Mapped[float] = mapped_column(Double, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    buckets: Mapped[list["BucketSnapshot"]] = relationship(
        back_populates="snapshot",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class BucketSnapshot(Base):
    """One bucket's value and percentages within a portfolio snapshot.

    target_percentage is a copy taken at snapshot time, not a reference.
    """

    __tablename__ = "bucket_snapshots"

    bucket_snapshot_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    snapshot_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("portfolio_snapshots.snapshot_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    bucket_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("buckets.bucket_id", ondelete="CASCADE"), nullable=False, index=True
    )
    total_value: Mapped[float] = mapped_column(Double, nullable=False)
    actual_percentage: Mapped[float] = mapped_column(Double, nullable=False)
    target_percentage: Mapped[float] = mapped_column(Double, nullable=False)

    snapshot: Mapped["PortfolioSnapshot"] = relationship(back_populates="buckets")
