"""Allocation engine: current vs. target percentages.

Pure computation over bucket and stock collections. Nothing here touches the
store, and nothing here fails: an empty portfolio summarises to a zero total
with no buckets, and a zero denominator yields 0% rather than an error.

    total value          = Σ stock.current_value over every bucket
    bucket value         = Σ stock.current_value within the bucket
    bucket current %     = bucket value / total value × 100   (0 if total is 0)
    bucket difference    = current % − target %
    stock current %      = stock value / bucket value × 100   (detail view only)
    stock over-allocated = stock current % > stock target %
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from blueprint_tracker.domain.models.allocation import (
    BucketAllocation,
    BucketDetailSummary,
    BucketWithStocks,
    PortfolioSummary,
    StockDetail,
)
from blueprint_tracker.domain.models.buckets import Bucket
from blueprint_tracker.domain.models.stocks import Stock


def percentage_of(part: float, whole: float) -> float:
    """Return ``part`` as a percentage of ``whole``; 0.0 when whole is not positive."""
    if whole > 0:
        return (part / whole) * 100.0
    return 0.0


class AllocationService:
    """Stateless allocation calculator for portfolio and bucket views."""

    def summarize(self, buckets: Sequence[BucketWithStocks]) -> PortfolioSummary:
        """Build the whole-portfolio summary from every bucket and its stocks."""
        total_value = sum(s.current_value for bws in buckets for s in bws.stocks)

        allocations: list[BucketAllocation] = []
        for bws in buckets:
            bucket_value = sum(s.current_value for s in bws.stocks)
            current = percentage_of(bucket_value, total_value)
            allocations.append(
                BucketAllocation(
                    bucket=bws.bucket,
                    current_value=bucket_value,
                    current_percentage=current,
                    target_percentage=bws.bucket.target_percentage,
                    difference=current - bws.bucket.target_percentage,
                    stock_count=len(bws.stocks),
                )
            )

        return PortfolioSummary(
            total_value=total_value,
            buckets=allocations,
            last_updated=self.last_updated(buckets),
        )

    def bucket_detail(self, bucket: Bucket, stocks: Sequence[Stock]) -> BucketDetailSummary:
        """Build a bucket drill-down.

        Stocks with a non-positive value may exist transiently in storage;
        they are left out so the remaining percentages sum to 100.
        """
        live = [s for s in stocks if s.current_value > 0]
        bucket_value = sum(s.current_value for s in live)

        details = []
        for stock in live:
            current = percentage_of(stock.current_value, bucket_value)
            details.append(
                StockDetail(
                    stock=stock,
                    current_percentage=current,
                    is_over_allocated=current > stock.target_percentage,
                )
            )

        return BucketDetailSummary(
            bucket=bucket,
            stocks=details,
            total_bucket_value=bucket_value,
        )

    @staticmethod
    def last_updated(buckets: Sequence[BucketWithStocks]) -> datetime | None:
        stamps = [bws.bucket.updated_at for bws in buckets]
        stamps.extend(s.updated_at for bws in buckets for s in bws.stocks)
        return max(stamps, default=None)
