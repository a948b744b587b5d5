"""SQLAlchemy implementation of StockRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blueprint_tracker.domain.events import Collection
from blueprint_tracker.domain.models.stocks import Stock as DomainStock
from blueprint_tracker.domain.repositories.stocks import StockRepository
from blueprint_tracker.infrastructure.persistence.models.ledger import Stock as OrmStock


def _stock_to_domain(row: OrmStock) -> DomainStock:
    return DomainStock(
        stock_id=row.stock_id,
        bucket_id=row.bucket_id,
        symbol=row.symbol,
        name=row.name,
        current_value=row.current_value,
        target_percentage=row.target_percentage,
        shares=row.shares,
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlStockRepository(StockRepository):
    def __init__(self, session: AsyncSession, changes: set[Collection] | None = None) -> None:
        self._session = session
        self._changes = changes if changes is not None else set()

    async def get_by_id(self, stock_id: UUID) -> DomainStock | None:
        stmt = select(OrmStock).where(OrmStock.stock_id == stock_id)
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return _stock_to_domain(row) if row else None

    async def list(self) -> list[DomainStock]:
        result = await self._session.execute(select(OrmStock).order_by(OrmStock.symbol))
        return [_stock_to_domain(row) for row in result.scalars()]

    async def list_by_bucket(self, bucket_id: UUID) -> list[DomainStock]:
        stmt = select(OrmStock).where(OrmStock.bucket_id == bucket_id).order_by(OrmStock.symbol)
        result = await self._session.execute(stmt)
        return [_stock_to_domain(row) for row in result.scalars()]

    async def sum_value_by_bucket(self, bucket_id: UUID) -> float:
        stmt = select(func.coalesce(func.sum(OrmStock.current_value), 0.0)).where(
            OrmStock.bucket_id == bucket_id
        )
        result = await self._session.execute(stmt)
        return float(result.scalar_one())

    async def sum_total_value(self) -> float:
        stmt = select(func.coalesce(func.sum(OrmStock.current_value), 0.0))
        result = await self._session.execute(stmt)
        return float(result.scalar_one())

    async def create(self, entity: DomainStock) -> DomainStock:
        row = OrmStock(
            stock_id=entity.stock_id,
            bucket_id=entity.bucket_id,
            symbol=entity.symbol,
            name=entity.name,
            current_value=entity.current_value,
            target_percentage=entity.target_percentage,
            shares=entity.shares,
            notes=entity.notes,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
        self._session.add(row)
        # No ORM relationship orders stock inserts ahead of their transactions.
        await self._session.flush()
        self._changes.add(Collection.STOCKS)
        return entity

    async def update(self, entity: DomainStock) -> DomainStock:
        stmt = select(OrmStock).where(OrmStock.stock_id == entity.stock_id)
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            raise ValueError(f"Stock {entity.stock_id} not found")
        row.bucket_id = entity.bucket_id
        row.symbol = entity.symbol
        row.name = entity.name
        row.current_value = entity.current_value
        row.target_percentage = entity.target_percentage
        row.shares = entity.shares
        row.notes = entity.notes
        row.updated_at = entity.updated_at
        self._changes.add(Collection.STOCKS)
        return entity

    async def delete(self, id: UUID) -> None:
        # Pending inserts (e.g. the closing transaction) are autoflushed first,
        # then ON DELETE SET NULL detaches them from the stock.
        await self._session.execute(delete(OrmStock).where(OrmStock.stock_id == id))
        self._changes.update({Collection.STOCKS, Collection.TRANSACTIONS})
