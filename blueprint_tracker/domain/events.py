"""In-process change notifications for ledger collections.

The store publishes the set of collections touched by every committed unit of
work. Live queries subscribe to the collections they read from and recompute
when any of them changes, so consumers are pushed fresh values instead of
polling.

Bursts are coalesced: a subscriber that falls behind sees one wake-up for any
number of notifications, and holds one merged set of changes while it waits.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from enum import Enum

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    """Observable ledger collections."""

    BUCKETS = "buckets"
    STOCKS = "stocks"
    TRANSACTIONS = "transactions"
    SNAPSHOTS = "snapshots"


class _Subscription:
    """Pending changes for one subscriber, merged until it next reads."""

    __slots__ = ("interest", "pending", "ready")

    def __init__(self, interest: frozenset[Collection]) -> None:
        self.interest = interest
        self.pending: set[Collection] = set()
        self.ready = asyncio.Event()

    def take(self) -> frozenset[Collection]:
        changed = frozenset(self.pending)
        self.pending.clear()
        self.ready.clear()
        return changed


class ChangeFeed:
    """Fan-out of collection change notifications to asyncio subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[_Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, changed: Iterable[Collection]) -> None:
        """Notify every subscriber whose collections intersect ``changed``."""
        changed = frozenset(changed)
        if not changed:
            return
        logger.debug("Ledger change: %s", sorted(c.value for c in changed))
        for subscription in self._subscribers:
            if subscription.interest & changed:
                subscription.pending |= changed
                subscription.ready.set()

    async def subscribe(
        self, collections: Iterable[Collection]
    ) -> AsyncIterator[frozenset[Collection]]:
        """Yield once immediately, then once per batch of relevant changes.

        The first value is an empty set (initial load). Registration happens
        before the first yield, so no change committed after that point is
        missed. A subscriber holds at most one pending set, however many
        changes arrive before it reads. Closing the generator unregisters it.
        """
        subscription = _Subscription(frozenset(collections))
        self._subscribers.append(subscription)
        try:
            yield frozenset()
            while True:
                await subscription.ready.wait()
                yield subscription.take()
        finally:
            self._subscribers.remove(subscription)
