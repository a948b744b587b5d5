"""Historical snapshot domain models.

A PortfolioSnapshot is an aggregate root holding one BucketSnapshot per bucket
that existed when the snapshot was taken. Bucket targets are copied into the
snapshot so later edits never rewrite history.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .buckets import utc_now


class BucketSnapshot(BaseModel):
    """One bucket's allocation at snapshot time."""

    model_config = ConfigDict(frozen=True)

    snapshot_id: UUID
    bucket_id: UUID
    total_value: float = Field(ge=0.0)
    actual_percentage: float = Field(ge=0.0)
    target_percentage: float = Field(ge=0.0, le=100.0)


class PortfolioSnapshot(BaseModel):
    """A timestamped capture of the whole portfolio."""

    snapshot_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=utc_now)
    total_value: float = Field(ge=0.0)
    notes: str | None = None
    buckets: list[BucketSnapshot] = Field(default_factory=list)

    @model_validator(mode="after")
    def _buckets_belong_to_snapshot(self) -> PortfolioSnapshot:
        for row in self.buckets:
            if row.snapshot_id != self.snapshot_id:
                raise ValueError(
                    f"BucketSnapshot for bucket {row.bucket_id} references snapshot "
                    f"{row.snapshot_id}, expected {self.snapshot_id}"
                )
        return self


class HistoricalAllocation(BaseModel):
    """Flat history row: one bucket's actual percentage at one snapshot time."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    bucket_id: UUID
    actual_percentage: float


class HistoricalDataPoint(BaseModel):
    """All bucket percentages recorded by a single snapshot event."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    bucket_allocations: dict[UUID, float]
