"""Async SQLAlchemy settings, engine and session factory.

Nothing here is created at import time: the application builds one engine
from a Settings instance at startup and passes it down.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import DateTime, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./blueprint_tracker.db"
    database_echo: bool = False
    log_level: str = "INFO"
    snapshot_retention_days: int = 365
    seed_default_portfolio: bool = False


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class UtcDateTime(TypeDecorator[datetime]):
    """Timezone-aware datetime column normalised to UTC.

    SQLite drops tzinfo on storage; values read back naive are UTC by
    construction and get it re-attached.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):  # type: ignore[no-untyped-def]
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError(f"Naive datetime {value!r} cannot be stored; attach a timezone")
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):  # type: ignore[no-untyped-def]
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
    # SQLite ignores ON DELETE clauses unless enforcement is switched on per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: Settings, **kwargs: object) -> AsyncEngine:
    """Create the async engine described by ``settings``."""
    if settings.database_url.startswith("postgresql"):
        kwargs.setdefault("pool_pre_ping", True)
    engine = create_async_engine(settings.database_url, echo=settings.database_echo, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create every table registered on Base.metadata (local SQLite setups and tests).

    PostgreSQL deployments are migrated with Alembic instead.
    """
    import blueprint_tracker.infrastructure.persistence.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
