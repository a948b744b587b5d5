"""Domain model package.

All domain objects are Pydantic models with no ORM or infrastructure
dependencies. Import from this package to avoid coupling application code to
individual module paths.
"""

from .allocation import (
    BucketAllocation,
    BucketDetailSummary,
    BucketWithStocks,
    PortfolioSummary,
    StockDetail,
)
from .buckets import Bucket
from .enums import TimeRange, TradeSide, TransactionKind
from .snapshots import (
    BucketSnapshot,
    HistoricalAllocation,
    HistoricalDataPoint,
    PortfolioSnapshot,
)
from .stocks import Stock, StockTransaction

__all__ = [
    # enums
    "TimeRange",
    "TradeSide",
    "TransactionKind",
    # ledger
    "Bucket",
    "Stock",
    "StockTransaction",
    # snapshots
    "BucketSnapshot",
    "HistoricalAllocation",
    "HistoricalDataPoint",
    "PortfolioSnapshot",
    # derived views
    "BucketAllocation",
    "BucketDetailSummary",
    "BucketWithStocks",
    "PortfolioSummary",
    "StockDetail",
]
