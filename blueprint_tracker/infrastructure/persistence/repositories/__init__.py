"""Concrete SQLAlchemy repository implementations.

Exports every SqlRepository class and the get_repositories() factory used by
SqlLedgerStore to bind one set of repositories to each unit of work.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from blueprint_tracker.domain.events import Collection
from blueprint_tracker.domain.repositories.store import Repositories

from .buckets import SqlBucketRepository
from .snapshots import SqlSnapshotRepository
from .stocks import SqlStockRepository
from .transactions import SqlTransactionRepository


def get_repositories(
    session: AsyncSession, changes: set[Collection] | None = None
) -> Repositories:
    """Construct all repositories bound to the given session.

    Every repository records the collections it mutates into ``changes`` so
    the caller can publish them once the session commits:

        changes: set[Collection] = set()
        async with session.begin():
            repos = get_repositories(session, changes)
            await repos.buckets.create(bucket)
        feed.publish(changes)
    """
    changes = changes if changes is not None else set()
    return Repositories(
        buckets=SqlBucketRepository(session, changes),
        stocks=SqlStockRepository(session, changes),
        transactions=SqlTransactionRepository(session, changes),
        snapshots=SqlSnapshotRepository(session, changes),
    )


__all__ = [
    "SqlBucketRepository",
    "SqlStockRepository",
    "SqlTransactionRepository",
    "SqlSnapshotRepository",
    "get_repositories",
]
