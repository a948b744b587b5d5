"""Stock repository interface."""

from __future__ import annotations

from abc import abstractmethod
from uuid import UUID

from blueprint_tracker.domain.models.stocks import Stock

from .base import Repository


class StockRepository(Repository[Stock]):
    """Read/write interface for Stock positions.

    list() and list_by_bucket() order by symbol ascending.
    """

    async def get(self, id: UUID) -> Stock | None:
        return await self.get_by_id(id)

    @abstractmethod
    async def get_by_id(self, stock_id: UUID) -> Stock | None:
        """Return the stock, or None."""

    @abstractmethod
    async def list_by_bucket(self, bucket_id: UUID) -> list[Stock]:
        """Return every stock owned by the given bucket."""

    @abstractmethod
    async def sum_value_by_bucket(self, bucket_id: UUID) -> float:
        """Return the summed current value of a bucket's stocks (0.0 when empty)."""

    @abstractmethod
    async def sum_total_value(self) -> float:
        """Return the summed current value of every stock (0.0 when empty)."""
