"""Transaction repository interface."""

from __future__ import annotations

from abc import abstractmethod
from uuid import UUID

from blueprint_tracker.domain.models.stocks import StockTransaction

from .base import Repository


class TransactionRepository(Repository[StockTransaction]):
    """Append-only interface for the stock transaction trail.

    Transactions are never updated or deleted by normal operation; they
    outlive the stock they reference. Reads return newest first.
    """

    async def get(self, id: UUID) -> StockTransaction | None:
        return await self.get_by_id(id)

    @abstractmethod
    async def get_by_id(self, transaction_id: UUID) -> StockTransaction | None:
        """Return the transaction, or None."""

    @abstractmethod
    async def list_by_symbol(self, symbol: str) -> list[StockTransaction]:
        """Return every transaction for a ticker (case-insensitive)."""

    @abstractmethod
    async def list_by_stock(self, stock_id: UUID) -> list[StockTransaction]:
        """Return every transaction still linked to the given stock."""
