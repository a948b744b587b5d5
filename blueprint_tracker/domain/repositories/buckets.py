"""Bucket repository interface."""

from __future__ import annotations

from abc import abstractmethod
from uuid import UUID

from blueprint_tracker.domain.models.allocation import BucketWithStocks
from blueprint_tracker.domain.models.buckets import Bucket

from .base import Repository


class BucketRepository(Repository[Bucket]):
    """Read/write interface for Buckets.

    list() orders by display_order ascending. Deleting a bucket cascades to
    its stocks and bucket snapshots.
    """

    async def get(self, id: UUID) -> Bucket | None:
        return await self.get_by_id(id)

    @abstractmethod
    async def get_by_id(self, bucket_id: UUID) -> Bucket | None:
        """Return the bucket, or None."""

    @abstractmethod
    async def sum_target_percentage(self) -> float:
        """Return the sum of every bucket's target percentage (0.0 when empty)."""

    @abstractmethod
    async def count(self) -> int:
        """Return the number of buckets."""

    @abstractmethod
    async def max_display_order(self) -> int:
        """Return the highest display_order in use (0 when empty)."""

    @abstractmethod
    async def list_with_stocks(self) -> list[BucketWithStocks]:
        """Return every bucket with its stocks embedded, in display order."""
