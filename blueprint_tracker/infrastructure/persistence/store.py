"""SQLAlchemy-backed LedgerStore."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blueprint_tracker.domain.events import ChangeFeed, Collection
from blueprint_tracker.domain.repositories.store import LedgerStore, Repositories

from .repositories import get_repositories

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlLedgerStore(LedgerStore):
    """One session transaction per unit of work; change publication after commit.

    The feed is only notified once the transaction has committed, so a live
    query never observes half of a multi-row write (e.g. a snapshot header
    without its bucket rows, or a stock update without its transaction).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        feed: ChangeFeed | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._feed = feed or ChangeFeed()

    @property
    def feed(self) -> ChangeFeed:
        return self._feed

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[Repositories]:
        changes: set[Collection] = set()
        async with self._session_factory() as session:
            async with session.begin():
                yield get_repositories(session, changes)
        if changes:
            self._feed.publish(changes)

    async def watch(
        self,
        collections: Iterable[Collection],
        query: Callable[[Repositories], Awaitable[T]],
    ) -> AsyncIterator[T]:
        updates = self._feed.subscribe(collections)
        try:
            async for _ in updates:
                async with self.unit_of_work() as repos:
                    value = await query(repos)
                yield value
        finally:
            await updates.aclose()
