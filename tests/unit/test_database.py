"""Unit tests for blueprint_tracker/infrastructure/database.py.

Tests cover Settings defaults, env var override, the UTC column type and
engine/session factory construction.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from blueprint_tracker.infrastructure.database import (
    Base,
    Settings,
    UtcDateTime,
    create_engine,
    create_session_factory,
)


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("DATABASE_URL", "LOG_LEVEL", "SNAPSHOT_RETENTION_DAYS", "SEED_DEFAULT_PORTFOLIO"):
        monkeypatch.delenv(var, raising=False)


def test_settings_default_url_uses_aiosqlite(clean_env):
    assert Settings().database_url.startswith("sqlite+aiosqlite://")


def test_settings_default_retention_is_one_year(clean_env):
    assert Settings().snapshot_retention_days == 365


def test_settings_seed_disabled_by_default(clean_env):
    assert Settings().seed_default_portfolio is False


def test_settings_reads_database_url_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@myhost/mydb")
    assert Settings().database_url == "postgresql+asyncpg://u:p@myhost/mydb"


def test_settings_reads_retention_from_env(monkeypatch):
    monkeypatch.setenv("SNAPSHOT_RETENTION_DAYS", "90")
    assert Settings().snapshot_retention_days == 90


def test_base_is_declarative_base():
    assert issubclass(Base, DeclarativeBase)


# --- UtcDateTime ---

def test_utc_datetime_rejects_naive_values():
    with pytest.raises(ValueError):
        UtcDateTime().process_bind_param(datetime(2024, 1, 1), None)


def test_utc_datetime_converts_to_utc():
    local = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    stored = UtcDateTime().process_bind_param(local, None)
    assert stored == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert stored.tzinfo == timezone.utc


def test_utc_datetime_attaches_utc_on_read():
    loaded = UtcDateTime().process_result_value(datetime(2024, 1, 1), None)
    assert loaded.tzinfo == timezone.utc


# --- engine / sessions ---

async def test_engine_is_async():
    engine = create_engine(Settings(database_url="sqlite+aiosqlite://"))
    try:
        assert isinstance(engine, AsyncEngine)
    finally:
        await engine.dispose()


async def test_session_factory_produces_async_sessions():
    engine = create_engine(Settings(database_url="sqlite+aiosqlite://"))
    try:
        factory = create_session_factory(engine)
        assert isinstance(factory, async_sessionmaker)
        assert factory.class_ is AsyncSession
    finally:
        await engine.dispose()
