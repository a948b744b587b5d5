"""Persistence package.

Importing this package registers every ORM mapper with Base.metadata
(required for Alembic autogenerate and SQLAlchemy mapper configuration)
and exports the repository implementations, their factory, and the store.
"""

from blueprint_tracker.infrastructure.persistence.models import *  # noqa: F401, F403
from blueprint_tracker.infrastructure.persistence.models import __all__ as _orm_all
from blueprint_tracker.infrastructure.persistence.repositories import (
    SqlBucketRepository,
    SqlSnapshotRepository,
    SqlStockRepository,
    SqlTransactionRepository,
    get_repositories,
)
from blueprint_tracker.infrastructure.persistence.store import SqlLedgerStore

__all__ = _orm_all + [
    "SqlBucketRepository",
    "SqlStockRepository",
    "SqlTransactionRepository",
    "SqlSnapshotRepository",
    "SqlLedgerStore",
    "get_repositories",
]
