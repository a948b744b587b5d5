"""SQLAlchemy implementation of TransactionRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blueprint_tracker.domain.events import Collection
from blueprint_tracker.domain.models.enums import TransactionKind
from blueprint_tracker.domain.models.stocks import StockTransaction as DomainTransaction
from blueprint_tracker.domain.repositories.transactions import TransactionRepository
from blueprint_tracker.infrastructure.persistence.models.ledger import (
    StockTransaction as OrmTransaction,
)


def _transaction_to_domain(row: OrmTransaction) -> DomainTransaction:
    return DomainTransaction(
        transaction_id=row.transaction_id,
        stock_id=row.stock_id,
        symbol=row.symbol,
        amount=row.amount,
        kind=TransactionKind(row.kind),
        timestamp=row.timestamp,
    )


class SqlTransactionRepository(TransactionRepository):
    def __init__(self, session: AsyncSession, changes: set[Collection] | None = None) -> None:
        self._session = session
        self._changes = changes if changes is not None else set()

    async def get_by_id(self, transaction_id: UUID) -> DomainTransaction | None:
        stmt = select(OrmTransaction).where(OrmTransaction.transaction_id == transaction_id)
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return _transaction_to_domain(row) if row else None

    async def list(self) -> list[DomainTransaction]:
        stmt = select(OrmTransaction).order_by(OrmTransaction.timestamp.desc())
        result = await self._session.execute(stmt)
        return [_transaction_to_domain(row) for row in result.scalars()]

    async def list_by_symbol(self, symbol: str) -> list[DomainTransaction]:
        stmt = (
            select(OrmTransaction)
            .where(func.upper(OrmTransaction.symbol) == symbol.strip().upper())
            .order_by(OrmTransaction.timestamp.desc())
        )
        result = await self._session.execute(stmt)
        return [_transaction_to_domain(row) for row in result.scalars()]

    async def list_by_stock(self, stock_id: UUID) -> list[DomainTransaction]:
        stmt = (
            select(OrmTransaction)
            .where(OrmTransaction.stock_id == stock_id)
            .order_by(OrmTransaction.timestamp.desc())
        )
        result = await self._session.execute(stmt)
        return [_transaction_to_domain(row) for row in result.scalars()]

    async def create(self, entity: DomainTransaction) -> DomainTransaction:
        row = OrmTransaction(
            transaction_id=entity.transaction_id,
            stock_id=entity.stock_id,
            symbol=entity.symbol,
            amount=entity.amount,
            kind=entity.kind.value,
            timestamp=entity.timestamp,
        )
        self._session.add(row)
        self._changes.add(Collection.TRANSACTIONS)
        return entity

    async def update(self, entity: DomainTransaction) -> DomainTransaction:
        raise NotImplementedError("Transactions are append-only")

    async def delete(self, id: UUID) -> None:
        raise NotImplementedError("Transactions are append-only")
