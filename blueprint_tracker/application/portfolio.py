"""Portfolio service: the application boundary over the ledger store.

Each mutating operation runs as one store unit of work and returns a
``Success`` or ``Failure`` instead of raising:

- ValidationError: allocation rules or input ranges rejected the request;
  nothing was written.
- NotFoundError: the referenced bucket or stock does not exist; no-op.
- StoreError: the database failed; the unit of work was rolled back.

Reads return plain values. Every collection read has a ``watch_*``
counterpart: an async iterator yielding a fresh result now and after every
committed change to the collections it depends on. Stop iterating (or call
``aclose()``) to stop observing.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from datetime import datetime
from uuid import UUID

import pandas as pd
from pydantic import ValidationError as ModelValidationError
from sqlalchemy.exc import SQLAlchemyError

from blueprint_tracker.domain.errors import (
    DomainError,
    ErrorCode,
    NotFoundError,
    StoreError,
    ValidationError,
)
from blueprint_tracker.domain.events import Collection
from blueprint_tracker.domain.models.allocation import BucketDetailSummary, PortfolioSummary
from blueprint_tracker.domain.models.buckets import Bucket, utc_now
from blueprint_tracker.domain.models.enums import TimeRange, TradeSide
from blueprint_tracker.domain.models.snapshots import HistoricalDataPoint, PortfolioSnapshot
from blueprint_tracker.domain.models.stocks import Stock, StockTransaction
from blueprint_tracker.domain.repositories.store import LedgerStore, Repositories
from blueprint_tracker.domain.result import Failure, Result, Success
from blueprint_tracker.domain.services.allocation import AllocationService
from blueprint_tracker.domain.services.snapshots import SnapshotService
from blueprint_tracker.domain.services.transactions import TransactionRecorder, ValueChange
from blueprint_tracker.domain.services.validation import AllocationValidator

logger = logging.getLogger(__name__)

DEFAULT_BUCKET_COLOR = "#4285F4"


class PortfolioService:
    """Orchestrates buckets, stocks, transactions and snapshots over a LedgerStore."""

    def __init__(
        self,
        store: LedgerStore,
        *,
        allocation: AllocationService | None = None,
        validator: AllocationValidator | None = None,
        recorder: TransactionRecorder | None = None,
        snapshots: SnapshotService | None = None,
        retention_days: int = 365,
    ) -> None:
        self._store = store
        self._allocation = allocation or AllocationService()
        self._validator = validator or AllocationValidator()
        self._recorder = recorder or TransactionRecorder()
        self._snapshots = snapshots or SnapshotService()
        self._retention_days = retention_days

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    async def list_buckets(self) -> list[Bucket]:
        async with self._store.unit_of_work() as repos:
            return await repos.buckets.list()

    async def get_bucket(self, bucket_id: UUID) -> Result[Bucket, NotFoundError]:
        async with self._store.unit_of_work() as repos:
            bucket = await repos.buckets.get(bucket_id)
        if bucket is None:
            return _bucket_not_found(bucket_id)
        return Success(value=bucket)

    async def list_stocks(self, bucket_id: UUID | None = None) -> list[Stock]:
        async with self._store.unit_of_work() as repos:
            return await self._query_stocks(repos, bucket_id)

    async def list_transactions(self, symbol: str) -> list[StockTransaction]:
        """Transaction trail for a ticker, newest first, including closed positions."""
        async with self._store.unit_of_work() as repos:
            return await repos.transactions.list_by_symbol(symbol)

    async def list_stock_transactions(self, stock_id: UUID) -> list[StockTransaction]:
        async with self._store.unit_of_work() as repos:
            return await repos.transactions.list_by_stock(stock_id)

    async def get_portfolio_summary(self) -> PortfolioSummary:
        async with self._store.unit_of_work() as repos:
            return await self._query_summary(repos)

    async def get_bucket_detail(self, bucket_id: UUID) -> BucketDetailSummary | None:
        async with self._store.unit_of_work() as repos:
            return await self._query_bucket_detail(repos, bucket_id)

    async def list_recent_snapshots(self, limit: int = 30) -> list[PortfolioSnapshot]:
        async with self._store.unit_of_work() as repos:
            return await repos.snapshots.list_recent(limit)

    async def get_historical_data(
        self, days_back: int | TimeRange = TimeRange.THIRTY_DAYS
    ) -> list[HistoricalDataPoint]:
        """One data point per snapshot taken in the last ``days_back`` days, oldest first."""
        days = days_back.days if isinstance(days_back, TimeRange) else days_back
        since = self._snapshots.cutoff(days)
        async with self._store.unit_of_work() as repos:
            rows = await repos.snapshots.list_allocations_since(since)
        return self._snapshots.group_history(rows)

    async def get_history_frame(
        self, days_back: int | TimeRange = TimeRange.THIRTY_DAYS
    ) -> pd.DataFrame:
        """Historical bucket percentages as a timestamp × bucket_id frame."""
        return self._snapshots.to_frame(await self.get_historical_data(days_back))

    # ------------------------------------------------------------------ #
    # Live queries                                                         #
    # ------------------------------------------------------------------ #

    def watch_buckets(self) -> AsyncIterator[list[Bucket]]:
        async def query(repos: Repositories) -> list[Bucket]:
            return await repos.buckets.list()

        return self._store.watch([Collection.BUCKETS], query)

    def watch_stocks(self, bucket_id: UUID | None = None) -> AsyncIterator[list[Stock]]:
        async def query(repos: Repositories) -> list[Stock]:
            return await self._query_stocks(repos, bucket_id)

        return self._store.watch([Collection.STOCKS], query)

    def watch_transactions(self, symbol: str) -> AsyncIterator[list[StockTransaction]]:
        async def query(repos: Repositories) -> list[StockTransaction]:
            return await repos.transactions.list_by_symbol(symbol)

        return self._store.watch([Collection.TRANSACTIONS], query)

    def watch_stock_transactions(self, stock_id: UUID) -> AsyncIterator[list[StockTransaction]]:
        async def query(repos: Repositories) -> list[StockTransaction]:
            return await repos.transactions.list_by_stock(stock_id)

        return self._store.watch([Collection.TRANSACTIONS], query)

    def watch_portfolio_summary(self) -> AsyncIterator[PortfolioSummary]:
        return self._store.watch([Collection.BUCKETS, Collection.STOCKS], self._query_summary)

    def watch_bucket_detail(self, bucket_id: UUID) -> AsyncIterator[BucketDetailSummary | None]:
        async def query(repos: Repositories) -> BucketDetailSummary | None:
            return await self._query_bucket_detail(repos, bucket_id)

        return self._store.watch([Collection.BUCKETS, Collection.STOCKS], query)

    # ------------------------------------------------------------------ #
    # Buckets                                                              #
    # ------------------------------------------------------------------ #

    async def add_bucket(
        self,
        name: str,
        target_percentage: float,
        color: str = DEFAULT_BUCKET_COLOR,
        display_order: int | None = None,
    ) -> Result[Bucket, DomainError]:
        """Insert a bucket unless the target total would exceed 100%.

        display_order defaults to the end of the current list.
        """
        try:
            async with self._store.unit_of_work() as repos:
                if display_order is None:
                    display_order = await repos.buckets.max_display_order() + 1
                bucket = Bucket(
                    name=name,
                    target_percentage=target_percentage,
                    color=color,
                    display_order=display_order,
                )
                existing_total = await repos.buckets.sum_target_percentage()
                checked = self._validator.check_insert(existing_total, bucket)
                if isinstance(checked, Failure):
                    return checked
                await repos.buckets.create(bucket)
        except ModelValidationError as exc:
            return _invalid(exc)
        except SQLAlchemyError as exc:
            return _store_failure("add bucket", exc)
        logger.info("Added bucket %r (%s%%)", bucket.name, bucket.target_percentage)
        return Success(value=bucket)

    async def update_bucket(self, bucket: Bucket) -> Result[Bucket, DomainError]:
        """Persist an edited bucket. The target total is not checked here."""
        try:
            async with self._store.unit_of_work() as repos:
                if await repos.buckets.get(bucket.bucket_id) is None:
                    return _bucket_not_found(bucket.bucket_id)
                updated = bucket.touched()
                await repos.buckets.update(updated)
        except SQLAlchemyError as exc:
            return _store_failure("update bucket", exc)
        logger.info("Updated bucket %r", updated.name)
        return Success(value=updated)

    async def update_all_buckets(self, buckets: Sequence[Bucket]) -> Result[list[Bucket], DomainError]:
        """Replace the targets of several buckets at once, all or nothing.

        The resulting set of bucket targets (the batch plus any stored bucket
        not in it) must total 100% within ±0.001.
        """
        try:
            async with self._store.unit_of_work() as repos:
                stored = {b.bucket_id: b for b in await repos.buckets.list()}
                for bucket in buckets:
                    if bucket.bucket_id not in stored:
                        return _bucket_not_found(bucket.bucket_id)

                proposed = {**stored, **{b.bucket_id: b for b in buckets}}
                checked = self._validator.check_bulk(list(proposed.values()))
                if isinstance(checked, Failure):
                    return checked

                updated = [b.touched() for b in buckets]
                for bucket in updated:
                    await repos.buckets.update(bucket)
        except SQLAlchemyError as exc:
            return _store_failure("update buckets", exc)
        logger.info("Updated %d bucket allocations", len(updated))
        return Success(value=updated)

    async def delete_bucket(self, bucket_id: UUID) -> Result[None, DomainError]:
        """Delete a bucket together with its stocks and bucket snapshots."""
        try:
            async with self._store.unit_of_work() as repos:
                bucket = await repos.buckets.get(bucket_id)
                if bucket is None:
                    return _bucket_not_found(bucket_id)
                await repos.buckets.delete(bucket_id)
        except SQLAlchemyError as exc:
            return _store_failure("delete bucket", exc)
        logger.info("Deleted bucket %r", bucket.name)
        return Success(value=None)

    # ------------------------------------------------------------------ #
    # Stocks and transactions                                              #
    # ------------------------------------------------------------------ #

    async def add_stock(
        self,
        bucket_id: UUID,
        symbol: str,
        name: str | None = None,
        current_value: float = 0.0,
        target_percentage: float = 0.0,
        shares: float | None = None,
        notes: str | None = None,
    ) -> Result[Stock, DomainError]:
        """Open a position. A positive initial value is recorded as a BUY."""
        try:
            async with self._store.unit_of_work() as repos:
                if await repos.buckets.get(bucket_id) is None:
                    return _bucket_not_found(bucket_id)
                stock = Stock(
                    bucket_id=bucket_id,
                    symbol=symbol,
                    name=name or symbol.strip().upper(),
                    current_value=current_value,
                    target_percentage=target_percentage,
                    shares=shares,
                    notes=notes,
                )
                await self._open_position(repos, stock)
        except ModelValidationError as exc:
            return _invalid(exc)
        except SQLAlchemyError as exc:
            return _store_failure("add stock", exc)
        logger.info("Added %s (%.2f) to bucket %s", stock.symbol, stock.current_value, bucket_id)
        return Success(value=stock)

    async def update_stock(self, stock: Stock) -> Result[Stock | None, DomainError]:
        """Persist an edited stock.

        A changed current value is recorded as ADD_FUNDS / REMOVE_FUNDS with
        the delta. A value of zero closes the position and the result is
        ``Success(None)``.
        """
        try:
            async with self._store.unit_of_work() as repos:
                current = await repos.stocks.get(stock.stock_id)
                if current is None:
                    return _stock_not_found(stock.stock_id)
                if stock.bucket_id != current.bucket_id and (
                    await repos.buckets.get(stock.bucket_id) is None
                ):
                    return _bucket_not_found(stock.bucket_id)

                change = self._recorder.edit(current, stock)
                if change is None:
                    updated: Stock | None = stock.touched()
                    await repos.stocks.update(updated)
                else:
                    updated = await self._apply(repos, change)
        except SQLAlchemyError as exc:
            return _store_failure("update stock", exc)
        return Success(value=updated)

    async def trade(
        self, bucket_id: UUID, symbol: str, delta: float, side: TradeSide
    ) -> Result[Stock | None, DomainError]:
        """Buy or sell ``delta`` worth of a ticker within a bucket.

        - Known ticker (case-insensitive): value moves by ±delta, floored at
          zero; BUY +delta or SELL −delta is recorded.
        - Unknown ticker, BUY: a new stock is opened with value delta.
        - Unknown ticker, SELL: nothing happens; returns ``Success(None)``.
        A position sold down to zero is deleted and ``Success(None)`` returned.
        """
        checked = self._validator.check_amount(delta, "delta")
        if isinstance(checked, Failure):
            return checked
        try:
            async with self._store.unit_of_work() as repos:
                if await repos.buckets.get(bucket_id) is None:
                    return _bucket_not_found(bucket_id)
                stocks = await repos.stocks.list_by_bucket(bucket_id)
                existing = next((s for s in stocks if s.matches(symbol)), None)

                if existing is not None:
                    result = await self._apply(repos, self._recorder.trade(existing, delta, side))
                elif side is TradeSide.BUY:
                    ticker = symbol.strip().upper()
                    result = Stock(bucket_id=bucket_id, symbol=ticker, name=ticker, current_value=delta)
                    await self._open_position(repos, result)
                else:
                    logger.info("Ignored sell of %s: no position in bucket %s", symbol, bucket_id)
                    return Success(value=None)
        except ModelValidationError as exc:
            return _invalid(exc)
        except SQLAlchemyError as exc:
            return _store_failure(f"{side.value} {symbol}", exc)
        logger.info("%s %.2f of %s", side.value.capitalize(), delta, symbol.strip().upper())
        return Success(value=result)

    async def buy(self, bucket_id: UUID, symbol: str, delta: float) -> Result[Stock | None, DomainError]:
        return await self.trade(bucket_id, symbol, delta, TradeSide.BUY)

    async def sell(self, bucket_id: UUID, symbol: str, delta: float) -> Result[Stock | None, DomainError]:
        return await self.trade(bucket_id, symbol, delta, TradeSide.SELL)

    async def adjust_funds(self, stock_id: UUID, amount: float) -> Result[Stock | None, DomainError]:
        """Add (amount ≥ 0) or remove (amount < 0) funds from a position by id.

        Recorded as BUY (including a zero amount) or SELL with the signed amount.
        Removing more than the position holds closes it and returns ``Success(None)``.
        """
        checked = self._validator.check_finite(amount, "amount")
        if isinstance(checked, Failure):
            return checked
        try:
            async with self._store.unit_of_work() as repos:
                stock = await repos.stocks.get(stock_id)
                if stock is None:
                    return _stock_not_found(stock_id)
                result = await self._apply(repos, self._recorder.adjust_funds(stock, amount))
        except SQLAlchemyError as exc:
            return _store_failure("adjust funds", exc)
        logger.info("Adjusted %s by %.2f", stock.symbol, amount)
        return Success(value=result)

    async def set_stock_target(
        self, stock_id: UUID, target_percentage: float
    ) -> Result[Stock, DomainError]:
        """Change a stock's in-bucket target. Never records a transaction."""
        try:
            async with self._store.unit_of_work() as repos:
                stock = await repos.stocks.get(stock_id)
                if stock is None:
                    return _stock_not_found(stock_id)
                updated = Stock(
                    **{
                        **stock.model_dump(),
                        "target_percentage": target_percentage,
                        "updated_at": utc_now(),
                    }
                )
                await repos.stocks.update(updated)
        except ModelValidationError as exc:
            return _invalid(exc)
        except SQLAlchemyError as exc:
            return _store_failure("set stock target", exc)
        return Success(value=updated)

    async def delete_stock(self, stock_id: UUID) -> Result[None, DomainError]:
        """Delete a position. Its transactions remain, keyed by symbol."""
        try:
            async with self._store.unit_of_work() as repos:
                stock = await repos.stocks.get(stock_id)
                if stock is None:
                    return _stock_not_found(stock_id)
                await repos.stocks.delete(stock_id)
        except SQLAlchemyError as exc:
            return _store_failure("delete stock", exc)
        logger.info("Deleted stock %s", stock.symbol)
        return Success(value=None)

    # ------------------------------------------------------------------ #
    # Snapshots                                                            #
    # ------------------------------------------------------------------ #

    async def create_snapshot(self, note: str | None = None) -> Result[PortfolioSnapshot, DomainError]:
        """Capture every bucket's value and percentages in one atomic write."""
        try:
            async with self._store.unit_of_work() as repos:
                total_value = await repos.stocks.sum_total_value()
                bucket_values = [
                    (bucket, await repos.stocks.sum_value_by_bucket(bucket.bucket_id))
                    for bucket in await repos.buckets.list()
                ]
                snapshot = self._snapshots.build(total_value, bucket_values, note=note)
                await repos.snapshots.create(snapshot)
        except SQLAlchemyError as exc:
            return _store_failure("create snapshot", exc)
        logger.info(
            "Created snapshot %s: total %.2f across %d buckets",
            snapshot.snapshot_id,
            snapshot.total_value,
            len(snapshot.buckets),
        )
        return Success(value=snapshot)

    async def purge_snapshots_before(self, cutoff: datetime) -> Result[int, DomainError]:
        """Delete snapshots strictly older than ``cutoff``; returns how many went."""
        try:
            async with self._store.unit_of_work() as repos:
                removed = await repos.snapshots.delete_before(cutoff)
        except SQLAlchemyError as exc:
            return _store_failure("purge snapshots", exc)
        if removed:
            logger.info("Purged %d snapshots older than %s", removed, cutoff.isoformat())
        return Success(value=removed)

    async def purge_expired_snapshots(self, now: datetime | None = None) -> Result[int, DomainError]:
        """Apply the configured retention window."""
        return await self.purge_snapshots_before(
            self._snapshots.cutoff(self._retention_days, now)
        )

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    async def _query_stocks(self, repos: Repositories, bucket_id: UUID | None) -> list[Stock]:
        if bucket_id is None:
            return await repos.stocks.list()
        return await repos.stocks.list_by_bucket(bucket_id)

    async def _query_summary(self, repos: Repositories) -> PortfolioSummary:
        return self._allocation.summarize(await repos.buckets.list_with_stocks())

    async def _query_bucket_detail(
        self, repos: Repositories, bucket_id: UUID
    ) -> BucketDetailSummary | None:
        bucket = await repos.buckets.get(bucket_id)
        if bucket is None:
            return None
        stocks = await repos.stocks.list_by_bucket(bucket_id)
        return self._allocation.bucket_detail(bucket, stocks)

    async def _open_position(self, repos: Repositories, stock: Stock) -> None:
        await repos.stocks.create(stock)
        if stock.current_value > 0:
            await repos.transactions.create(self._recorder.open_position(stock))

    async def _apply(self, repos: Repositories, change: ValueChange) -> Stock | None:
        """Write a value change and its transaction; close the position at zero."""
        await repos.transactions.create(change.transaction)
        if change.closes_position:
            await repos.stocks.delete(change.stock.stock_id)
            logger.info("Closed position %s", change.stock.symbol)
            return None
        await repos.stocks.update(change.stock)
        return change.stock


def _bucket_not_found(bucket_id: UUID) -> Failure[NotFoundError]:
    logger.warning("Bucket %s not found", bucket_id)
    return Failure(
        error=NotFoundError(
            code=ErrorCode.BUCKET_NOT_FOUND,
            message="Bucket not found",
            resource_type="Bucket",
            resource_id=str(bucket_id),
        )
    )


def _stock_not_found(stock_id: UUID) -> Failure[NotFoundError]:
    logger.warning("Stock %s not found", stock_id)
    return Failure(
        error=NotFoundError(
            code=ErrorCode.STOCK_NOT_FOUND,
            message="Stock not found",
            resource_type="Stock",
            resource_id=str(stock_id),
        )
    )


def _invalid(exc: ModelValidationError) -> Failure[ValidationError]:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or None
    return Failure(
        error=ValidationError(
            code=ErrorCode.VALIDATION_FAILED,
            message=f"{field}: {first['msg']}" if field else first["msg"],
            field=field,
        )
    )


def _store_failure(operation: str, exc: SQLAlchemyError) -> Failure[StoreError]:
    logger.exception("Store failure during %s", operation)
    return Failure(
        error=StoreError(
            code=ErrorCode.STORE_FAILED,
            message=f"Could not {operation}",
            operation=operation,
            details={"reason": str(exc)},
        )
    )
