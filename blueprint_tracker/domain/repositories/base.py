"""Generic repository base interface.

Repository[T] is the root abstraction for all data-access interfaces in this
domain layer. Concrete implementations live in
blueprint_tracker/infrastructure/persistence/ and are handed to the domain by
a LedgerStore unit of work.

Design notes:
  - All methods are async to accommodate async database drivers.
  - T is the domain model type (never an ORM row).
  - list() takes no filters; collection-specific reads are declared on each
    specialised interface.
  - update() and delete() are present on the base; append-only collections
    raise NotImplementedError for them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar
from uuid import UUID

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Abstract CRUD interface for a domain aggregate or entity."""

    @abstractmethod
    async def get(self, id: UUID) -> T | None:
        """Return the entity with the given primary key, or None if not found."""

    @abstractmethod
    async def list(self) -> list[T]:
        """Return every entity in the collection's natural order."""

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Persist a new entity and return it."""

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Persist changes to an existing entity and return the updated version."""

    @abstractmethod
    async def delete(self, id: UUID) -> None:
        """Remove the entity with the given primary key."""
