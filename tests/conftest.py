"""Shared fixtures: an in-memory SQLite ledger per test."""

import pytest
from sqlalchemy.pool import StaticPool

from blueprint_tracker.application.portfolio import PortfolioService
from blueprint_tracker.infrastructure.database import (
    Settings,
    create_engine,
    create_schema,
    create_session_factory,
)
from blueprint_tracker.infrastructure.persistence.store import SqlLedgerStore


@pytest.fixture
async def engine():
    # StaticPool keeps every session on the one in-memory connection.
    engine = create_engine(Settings(database_url="sqlite+aiosqlite://"), poolclass=StaticPool)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine):
    return SqlLedgerStore(create_session_factory(engine))


@pytest.fixture
def service(store):
    return PortfolioService(store, retention_days=30)
