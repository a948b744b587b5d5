"""Snapshot repository interface."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from uuid import UUID

from blueprint_tracker.domain.models.snapshots import (
    HistoricalAllocation,
    PortfolioSnapshot,
)

from .base import Repository


class SnapshotRepository(Repository[PortfolioSnapshot]):
    """Read/write interface for PortfolioSnapshot aggregates.

    Snapshots are immutable after creation. They are removed only in bulk by
    delete_before(); update() and delete() are unsupported.
    """

    async def get(self, id: UUID) -> PortfolioSnapshot | None:
        return await self.get_by_id(id)

    @abstractmethod
    async def get_by_id(self, snapshot_id: UUID) -> PortfolioSnapshot | None:
        """Return the snapshot with embedded bucket rows, or None."""

    @abstractmethod
    async def create(self, entity: PortfolioSnapshot) -> PortfolioSnapshot:
        """Persist the snapshot and all its bucket rows in the same transaction."""

    @abstractmethod
    async def list_recent(self, limit: int = 30) -> list[PortfolioSnapshot]:
        """Return the most recent snapshots (with bucket rows), newest first."""

    @abstractmethod
    async def list_allocations_since(self, since: datetime) -> list[HistoricalAllocation]:
        """Return flat bucket-allocation rows for snapshots taken at or after ``since``.

        Rows are ordered by snapshot timestamp ascending.
        """

    @abstractmethod
    async def delete_before(self, cutoff: datetime) -> int:
        """Delete snapshots strictly older than ``cutoff``; return how many were removed."""
