"""ORM model registry: imports every model module so each mapper is
registered with Base.metadata before Alembic or SQLAlchemy runs.

Import order follows the dependency graph (referenced tables first).
"""

from blueprint_tracker.infrastructure.persistence.models.ledger import (
    Bucket,
    Stock,
    StockTransaction,
)
from blueprint_tracker.infrastructure.persistence.models.snapshots import (
    BucketSnapshot,
    PortfolioSnapshot,
)

__all__ = [
    # Ledger
    "Bucket",
    "Stock",
    "StockTransaction",
    # Snapshots
    "PortfolioSnapshot",
    "BucketSnapshot",
]
