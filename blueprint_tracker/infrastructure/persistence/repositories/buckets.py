"""SQLAlchemy implementation of BucketRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blueprint_tracker.domain.events import Collection
from blueprint_tracker.domain.models.allocation import BucketWithStocks
from blueprint_tracker.domain.models.buckets import Bucket as DomainBucket
from blueprint_tracker.domain.repositories.buckets import BucketRepository
from blueprint_tracker.infrastructure.persistence.models.ledger import Bucket as OrmBucket

from .stocks import _stock_to_domain


def _bucket_to_domain(row: OrmBucket) -> DomainBucket:
    return DomainBucket(
        bucket_id=row.bucket_id,
        name=row.name,
        target_percentage=row.target_percentage,
        color=row.color,
        display_order=row.display_order,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlBucketRepository(BucketRepository):
    def __init__(self, session: AsyncSession, changes: set[Collection] | None = None) -> None:
        self._session = session
        self._changes = changes if changes is not None else set()

    def _ordered(self) -> Select[tuple[OrmBucket]]:
        return select(OrmBucket).order_by(OrmBucket.display_order, OrmBucket.created_at)

    async def get_by_id(self, bucket_id: UUID) -> DomainBucket | None:
        stmt = select(OrmBucket).where(OrmBucket.bucket_id == bucket_id)
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return _bucket_to_domain(row) if row else None

    async def list(self) -> list[DomainBucket]:
        result = await self._session.execute(self._ordered())
        return [_bucket_to_domain(row) for row in result.scalars()]

    async def list_with_stocks(self) -> list[BucketWithStocks]:
        stmt = self._ordered().options(selectinload(OrmBucket.stocks))
        result = await self._session.execute(stmt)
        return [
            BucketWithStocks(
                bucket=_bucket_to_domain(row),
                stocks=[_stock_to_domain(s) for s in row.stocks],
            )
            for row in result.scalars()
        ]

    async def sum_target_percentage(self) -> float:
        stmt = select(func.coalesce(func.sum(OrmBucket.target_percentage), 0.0))
        result = await self._session.execute(stmt)
        return float(result.scalar_one())

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(OrmBucket))
        return int(result.scalar_one())

    async def max_display_order(self) -> int:
        stmt = select(func.coalesce(func.max(OrmBucket.display_order), 0))
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def create(self, entity: DomainBucket) -> DomainBucket:
        row = OrmBucket(
            bucket_id=entity.bucket_id,
            name=entity.name,
            target_percentage=entity.target_percentage,
            color=entity.color,
            display_order=entity.display_order,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
        self._session.add(row)
        self._changes.add(Collection.BUCKETS)
        return entity

    async def update(self, entity: DomainBucket) -> DomainBucket:
        stmt = select(OrmBucket).where(OrmBucket.bucket_id == entity.bucket_id)
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            raise ValueError(f"Bucket {entity.bucket_id} not found")
        row.name = entity.name
        row.target_percentage = entity.target_percentage
        row.color = entity.color
        row.display_order = entity.display_order
        row.updated_at = entity.updated_at
        self._changes.add(Collection.BUCKETS)
        return entity

    async def delete(self, id: UUID) -> None:
        # Stocks and bucket snapshots go with the bucket (ON DELETE CASCADE);
        # their transactions lose the stock link (ON DELETE SET NULL).
        await self._session.execute(delete(OrmBucket).where(OrmBucket.bucket_id == id))
        self._changes.update(Collection)
