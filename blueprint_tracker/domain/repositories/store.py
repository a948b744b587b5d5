"""Ledger store interface: units of work and live queries.

A LedgerStore hands out Repositories bound to a single transaction. Every
write performed inside one unit of work becomes visible together or not at
all; once it commits, the store notifies live queries of the collections that
changed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import TypeVar

from blueprint_tracker.domain.events import Collection

from .buckets import BucketRepository
from .snapshots import SnapshotRepository
from .stocks import StockRepository
from .transactions import TransactionRepository

T = TypeVar("T")


@dataclass
class Repositories:
    """All ledger repositories bound to one unit of work."""

    buckets: BucketRepository
    stocks: StockRepository
    transactions: TransactionRepository
    snapshots: SnapshotRepository


class LedgerStore(ABC):
    @abstractmethod
    def unit_of_work(self) -> AbstractAsyncContextManager[Repositories]:
        """Open a transaction; commit on clean exit, roll back on exception."""

    @abstractmethod
    def watch(
        self,
        collections: Iterable[Collection],
        query: Callable[[Repositories], Awaitable[T]],
    ) -> AsyncIterator[T]:
        """Yield ``query``'s result now and again after every change to ``collections``."""
