"""Domain repository interfaces.

All abstractions are defined here with abc.ABC and @abstractmethod.
Concrete implementations live in blueprint_tracker/infrastructure/persistence/
and are reached through a LedgerStore unit of work.

Import from this package rather than individual modules to avoid coupling
services to specific repository module paths.
"""

from .base import Repository
from .buckets import BucketRepository
from .snapshots import SnapshotRepository
from .stocks import StockRepository
from .store import LedgerStore, Repositories
from .transactions import TransactionRepository

__all__ = [
    "Repository",
    "BucketRepository",
    "StockRepository",
    "TransactionRepository",
    "SnapshotRepository",
    "Repositories",
    "LedgerStore",
]
