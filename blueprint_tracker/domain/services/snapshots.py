"""Snapshot builder: point-in-time captures and history reconstruction.

Writing side: build() turns live bucket values into one PortfolioSnapshot with
a BucketSnapshot per bucket, using the same percentage rule as the allocation
engine and copying each bucket's target as it stands right now.

Reading side: stored rows are flat (timestamp, bucket_id, actual %). Rows
sharing a timestamp came from one snapshot event; group_history() folds them
back into one HistoricalDataPoint per event, oldest first.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from uuid import uuid4

import pandas as pd

from blueprint_tracker.domain.models.buckets import Bucket, utc_now
from blueprint_tracker.domain.models.snapshots import (
    BucketSnapshot,
    HistoricalAllocation,
    HistoricalDataPoint,
    PortfolioSnapshot,
)

from .allocation import percentage_of


class SnapshotService:
    """Stateless snapshot construction and history grouping."""

    def build(
        self,
        total_value: float,
        bucket_values: Sequence[tuple[Bucket, float]],
        note: str | None = None,
        timestamp: datetime | None = None,
    ) -> PortfolioSnapshot:
        """Capture the current allocation of every bucket.

        Args:
            total_value: Summed value of every stock in the portfolio.
            bucket_values: (bucket, summed value of its stocks) for every bucket.
            note: Optional free-text annotation.
            timestamp: Snapshot time; defaults to now (UTC).
        """
        snapshot_id = uuid4()
        rows = [
            BucketSnapshot(
                snapshot_id=snapshot_id,
                bucket_id=bucket.bucket_id,
                total_value=value,
                actual_percentage=percentage_of(value, total_value),
                target_percentage=bucket.target_percentage,
            )
            for bucket, value in bucket_values
        ]
        return PortfolioSnapshot(
            snapshot_id=snapshot_id,
            timestamp=timestamp or utc_now(),
            total_value=total_value,
            notes=note,
            buckets=rows,
        )

    @staticmethod
    def cutoff(days_back: int, now: datetime | None = None) -> datetime:
        """Start of a look-back window of ``days_back`` days ending at ``now``."""
        return (now or utc_now()) - timedelta(days=days_back)

    def group_history(self, rows: Sequence[HistoricalAllocation]) -> list[HistoricalDataPoint]:
        """Fold flat allocation rows into one data point per snapshot timestamp."""
        if not rows:
            return []

        frame = pd.DataFrame([row.model_dump() for row in rows])
        points = []
        for timestamp, group in frame.groupby("timestamp", sort=True):
            points.append(
                HistoricalDataPoint(
                    timestamp=pd.Timestamp(timestamp).to_pydatetime(),
                    bucket_allocations=dict(
                        zip(group["bucket_id"], group["actual_percentage"].tolist())
                    ),
                )
            )
        return points

    def to_frame(self, points: Sequence[HistoricalDataPoint]) -> pd.DataFrame:
        """Pivot data points into a chart-ready frame.

        Index: snapshot timestamps (ascending). Columns: bucket ids. A bucket
        absent from a snapshot (created later, or deleted) shows as NaN.
        """
        index = pd.DatetimeIndex([p.timestamp for p in points], name="timestamp")
        frame = pd.DataFrame([dict(p.bucket_allocations) for p in points], index=index)
        return frame.sort_index()
