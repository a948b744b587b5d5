"""Default portfolio seed for an empty ledger.

Four buckets totalling 100% with one or two starter positions each. Seeding
is skipped once any bucket exists, so it is safe to run on every startup.
Seeded positions are an opening balance, not trades: no transactions are
recorded for them.
"""

from __future__ import annotations

import logging

from blueprint_tracker.domain.models.buckets import Bucket
from blueprint_tracker.domain.models.stocks import Stock
from blueprint_tracker.domain.repositories.store import LedgerStore

logger = logging.getLogger(__name__)

# (name, target %, color, [(symbol, name, value, in-bucket target %)])
DEFAULT_PORTFOLIO: list[tuple[str, float, str, list[tuple[str, str, float, float]]]] = [
    (
        "ETF",
        30.0,
        "#4285F4",
        [
            ("VTI", "Vanguard Total Stock Market ETF", 1000.0, 50.0),
            ("VXUS", "Vanguard Total International Stock ETF", 500.0, 25.0),
        ],
    ),
    ("DGIF", 30.0, "#34A853", [("SCHD", "Schwab US Dividend Equity ETF", 1200.0, 60.0)]),
    ("Growth", 30.0, "#FBBC05", [("GOOGL", "Alphabet Inc.", 800.0, 40.0)]),
    ("Spec", 10.0, "#EA4335", [("TSLA", "Tesla, Inc.", 1500.0, 50.0)]),
]


async def seed_default_portfolio(store: LedgerStore) -> bool:
    """Insert DEFAULT_PORTFOLIO if the ledger has no buckets. Returns True if seeded."""
    async with store.unit_of_work() as repos:
        if await repos.buckets.count() > 0:
            return False
        for order, (name, target, color, positions) in enumerate(DEFAULT_PORTFOLIO, start=1):
            bucket = await repos.buckets.create(
                Bucket(name=name, target_percentage=target, color=color, display_order=order)
            )
            for symbol, stock_name, value, stock_target in positions:
                await repos.stocks.create(
                    Stock(
                        bucket_id=bucket.bucket_id,
                        symbol=symbol,
                        name=stock_name,
                        current_value=value,
                        target_percentage=stock_target,
                    )
                )
    logger.info("Seeded default portfolio with %d buckets", len(DEFAULT_PORTFOLIO))
    return True
