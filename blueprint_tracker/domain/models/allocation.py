"""Derived (non-persisted) allocation views."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .buckets import Bucket
from .stocks import Stock


class BucketWithStocks(BaseModel):
    """A bucket together with every stock it currently owns."""

    bucket: Bucket
    stocks: list[Stock] = Field(default_factory=list)


class BucketAllocation(BaseModel):
    """Current vs. target allocation for one bucket.

    difference = current_percentage − target_percentage; positive means the
    bucket holds more than its target share.
    """

    model_config = ConfigDict(frozen=True)

    bucket: Bucket
    current_value: float
    current_percentage: float
    target_percentage: float
    difference: float
    stock_count: int


class PortfolioSummary(BaseModel):
    """Whole-portfolio allocation view.

    last_updated is the most recent updated_at across every bucket and stock
    that contributed, or None for an empty portfolio.
    """

    model_config = ConfigDict(frozen=True)

    total_value: float
    buckets: list[BucketAllocation] = Field(default_factory=list)
    last_updated: datetime | None = None


class StockDetail(BaseModel):
    """A stock with its share of the owning bucket."""

    model_config = ConfigDict(frozen=True)

    stock: Stock
    current_percentage: float
    is_over_allocated: bool


class BucketDetailSummary(BaseModel):
    """Single-bucket drill-down: positions and their in-bucket percentages."""

    model_config = ConfigDict(frozen=True)

    bucket: Bucket
    stocks: list[StockDetail] = Field(default_factory=list)
    total_bucket_value: float
