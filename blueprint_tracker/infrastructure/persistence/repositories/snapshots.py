"""SQLAlchemy implementation of SnapshotRepository."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blueprint_tracker.domain.events import Collection
from blueprint_tracker.domain.models.snapshots import (
    BucketSnapshot as DomainBucketSnapshot,
)
from blueprint_tracker.domain.models.snapshots import HistoricalAllocation
from blueprint_tracker.domain.models.snapshots import (
    PortfolioSnapshot as DomainSnapshot,
)
from blueprint_tracker.domain.repositories.snapshots import SnapshotRepository
from blueprint_tracker.infrastructure.persistence.models.snapshots import (
    BucketSnapshot as OrmBucketSnapshot,
)
from blueprint_tracker.infrastructure.persistence.models.snapshots import (
    PortfolioSnapshot as OrmSnapshot,
)


def _bucket_row_to_domain(row: OrmBucketSnapshot) -> DomainBucketSnapshot:
    return DomainBucketSnapshot(
        snapshot_id=row.snapshot_id,
        bucket_id=row.bucket_id,
        total_value=row.total_value,
        actual_percentage=row.actual_percentage,
        target_percentage=row.target_percentage,
    )


def _snapshot_to_domain(row: OrmSnapshot, include_buckets: bool = True) -> DomainSnapshot:
    buckets = [_bucket_row_to_domain(b) for b in row.buckets] if include_buckets else []
    return DomainSnapshot(
        snapshot_id=row.snapshot_id,
        timestamp=row.timestamp,
        total_value=row.total_value,
        notes=row.notes,
        buckets=buckets,
    )


class SqlSnapshotRepository(SnapshotRepository):
    def __init__(self, session: AsyncSession, changes: set[Collection] | None = None) -> None:
        self._session = session
        self._changes = changes if changes is not None else set()

    async def get_by_id(self, snapshot_id: UUID) -> DomainSnapshot | None:
        stmt = (
            select(OrmSnapshot)
            .options(selectinload(OrmSnapshot.buckets))
            .where(OrmSnapshot.snapshot_id == snapshot_id)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return _snapshot_to_domain(row) if row else None

    async def list(self) -> list[DomainSnapshot]:
        # Headers only; use get_by_id() or list_recent() for bucket rows.
        stmt = select(OrmSnapshot).order_by(OrmSnapshot.timestamp.desc())
        result = await self._session.execute(stmt)
        return [_snapshot_to_domain(row, include_buckets=False) for row in result.scalars()]

    async def list_recent(self, limit: int = 30) -> list[DomainSnapshot]:
        stmt = (
            select(OrmSnapshot)
            .options(selectinload(OrmSnapshot.buckets))
            .order_by(OrmSnapshot.timestamp.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [_snapshot_to_domain(row) for row in result.scalars()]

    async def list_allocations_since(self, since: datetime) -> list[HistoricalAllocation]:
        stmt = (
            select(
                OrmSnapshot.timestamp,
                OrmBucketSnapshot.bucket_id,
                OrmBucketSnapshot.actual_percentage,
            )
            .join(OrmBucketSnapshot, OrmBucketSnapshot.snapshot_id == OrmSnapshot.snapshot_id)
            .where(OrmSnapshot.timestamp >= since)
            .order_by(OrmSnapshot.timestamp.asc())
        )
        result = await self._session.execute(stmt)
        return [
            HistoricalAllocation(
                timestamp=timestamp,
                bucket_id=bucket_id,
                actual_percentage=actual_percentage,
            )
            for timestamp, bucket_id, actual_percentage in result.all()
        ]

    async def create(self, entity: DomainSnapshot) -> DomainSnapshot:
        row = OrmSnapshot(
            snapshot_id=entity.snapshot_id,
            timestamp=entity.timestamp,
            total_value=entity.total_value,
            notes=entity.notes,
        )
        bucket_rows = [
            OrmBucketSnapshot(
                snapshot_id=entity.snapshot_id,
                bucket_id=b.bucket_id,
                total_value=b.total_value,
                actual_percentage=b.actual_percentage,
                target_percentage=b.target_percentage,
            )
            for b in entity.buckets
        ]
        self._session.add(row)
        self._session.add_all(bucket_rows)
        self._changes.add(Collection.SNAPSHOTS)
        return entity

    async def delete_before(self, cutoff: datetime) -> int:
        result = await self._session.execute(
            delete(OrmSnapshot).where(OrmSnapshot.timestamp < cutoff)
        )
        if result.rowcount:
            self._changes.add(Collection.SNAPSHOTS)
        return result.rowcount or 0

    async def update(self, entity: DomainSnapshot) -> DomainSnapshot:
        raise NotImplementedError("Snapshots are immutable")

    async def delete(self, id: UUID) -> None:
        raise NotImplementedError("Snapshots are removed only by delete_before()")
