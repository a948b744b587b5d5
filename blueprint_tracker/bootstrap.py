"""Application wiring.

Builds the engine, store and PortfolioService from Settings. There is no
process-wide store handle: callers hold the returned objects and pass them
where needed.

    settings = Settings()
    configure_logging(settings)
    app = await build_application(settings)
    summary = await app.service.get_portfolio_summary()
    ...
    await app.close()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from blueprint_tracker.application.portfolio import PortfolioService
from blueprint_tracker.infrastructure.database import (
    Settings,
    create_engine,
    create_schema,
    create_session_factory,
)
from blueprint_tracker.infrastructure.persistence.seed import seed_default_portfolio
from blueprint_tracker.infrastructure.persistence.store import SqlLedgerStore

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


@dataclass
class Application:
    engine: AsyncEngine
    store: SqlLedgerStore
    service: PortfolioService

    async def close(self) -> None:
        await self.engine.dispose()


async def build_application(settings: Settings) -> Application:
    """Create the store and service; prepare SQLite schemas and optional seed data."""
    engine = create_engine(settings)
    if engine.dialect.name == "sqlite":
        await create_schema(engine)
    store = SqlLedgerStore(create_session_factory(engine))
    if settings.seed_default_portfolio:
        await seed_default_portfolio(store)
    service = PortfolioService(store, retention_days=settings.snapshot_retention_days)
    return Application(engine=engine, store=store, service=service)
