"""PortfolioService stock, trade and transaction operations."""

from uuid import uuid4

import pytest
from sqlalchemy import text

from blueprint_tracker.domain.errors import ErrorCode, StoreError
from blueprint_tracker.domain.models.enums import TradeSide, TransactionKind
from blueprint_tracker.domain.result import Failure, Success


@pytest.fixture
async def etf(service):
    return (await service.add_bucket("ETF", 30.0)).value


async def _position(service, bucket, symbol):
    stocks = await service.list_stocks(bucket.bucket_id)
    return next((s for s in stocks if s.symbol == symbol), None)


# --- add_stock ---

async def test_add_stock_records_opening_buy(service, etf):
    result = await service.add_stock(etf.bucket_id, "vti", "Vanguard Total", current_value=1000.0, target_percentage=50.0)
    assert isinstance(result, Success)
    assert result.value.symbol == "VTI"
    (txn,) = await service.list_stock_transactions(result.value.stock_id)
    assert txn.kind is TransactionKind.BUY
    assert txn.amount == pytest.approx(1000.0)


async def test_add_stock_with_zero_value_records_nothing(service, etf):
    result = await service.add_stock(etf.bucket_id, "VXUS")
    assert result.value.name == "VXUS"
    assert await service.list_transactions("VXUS") == []


async def test_add_stock_to_missing_bucket_is_not_found(service):
    result = await service.add_stock(uuid4(), "VTI", current_value=10.0)
    assert isinstance(result, Failure)
    assert result.error.code is ErrorCode.BUCKET_NOT_FOUND


async def test_add_stock_negative_value_is_validation_failure(service, etf):
    result = await service.add_stock(etf.bucket_id, "VTI", current_value=-5.0)
    assert isinstance(result, Failure)
    assert result.error.code is ErrorCode.VALIDATION_FAILED


# --- buy / sell ---

async def test_buy_new_symbol_opens_position(service, etf):
    result = await service.buy(etf.bucket_id, "VTI", 250.0)
    assert isinstance(result, Success)
    stocks = await service.list_stocks(etf.bucket_id)
    assert [(s.symbol, s.current_value) for s in stocks] == [("VTI", 250.0)]
    (txn,) = await service.list_transactions("VTI")
    assert txn.kind is TransactionKind.BUY
    assert txn.amount == pytest.approx(250.0)


async def test_buy_existing_symbol_is_case_insensitive(service, etf):
    await service.buy(etf.bucket_id, "VTI", 250.0)
    await service.buy(etf.bucket_id, "vti", 100.0)
    stocks = await service.list_stocks(etf.bucket_id)
    assert len(stocks) == 1
    assert stocks[0].current_value == pytest.approx(350.0)
    assert len(await service.list_transactions("VTI")) == 2


async def test_sell_reduces_value(service, etf):
    await service.buy(etf.bucket_id, "VTI", 1000.0)
    result = await service.sell(etf.bucket_id, "VTI", 400.0)
    assert result.value.current_value == pytest.approx(600.0)
    kinds = {t.kind: t.amount for t in await service.list_transactions("VTI")}
    assert kinds[TransactionKind.SELL] == pytest.approx(-400.0)


async def test_sell_unknown_symbol_is_silent_no_op(service, etf):
    result = await service.sell(etf.bucket_id, "TSLA", 100.0)
    assert result == Success(value=None)
    assert await service.list_stocks() == []
    assert await service.list_transactions("TSLA") == []


async def test_sell_to_zero_closes_position(service, etf):
    await service.buy(etf.bucket_id, "VTI", 1000.0)
    result = await service.sell(etf.bucket_id, "VTI", 1000.0)
    assert result == Success(value=None)
    assert await _position(service, etf, "VTI") is None


async def test_oversell_closes_position_and_records_requested_amount(service, etf):
    await service.buy(etf.bucket_id, "VTI", 100.0)
    await service.sell(etf.bucket_id, "VTI", 500.0)
    assert await service.list_stocks() == []
    sells = [t for t in await service.list_transactions("VTI") if t.kind is TransactionKind.SELL]
    assert sells[0].amount == pytest.approx(-500.0)


async def test_transactions_survive_position_close(service, etf):
    await service.buy(etf.bucket_id, "VTI", 100.0)
    await service.sell(etf.bucket_id, "VTI", 100.0)
    history = await service.list_transactions("vti")
    assert {t.kind for t in history} == {TransactionKind.BUY, TransactionKind.SELL}
    assert all(t.stock_id is None for t in history)


async def test_trade_rejects_non_positive_delta(service, etf):
    result = await service.trade(etf.bucket_id, "VTI", -10.0, TradeSide.BUY)
    assert isinstance(result, Failure)
    assert result.error.code is ErrorCode.INVALID_AMOUNT
    assert await service.list_stocks() == []


async def test_trade_in_missing_bucket_is_not_found(service):
    result = await service.buy(uuid4(), "VTI", 10.0)
    assert isinstance(result, Failure)
    assert result.error.code is ErrorCode.BUCKET_NOT_FOUND


async def test_same_symbol_in_two_buckets_is_two_positions(service, etf):
    growth = (await service.add_bucket("Growth", 30.0)).value
    await service.buy(etf.bucket_id, "VTI", 100.0)
    await service.buy(growth.bucket_id, "VTI", 200.0)
    assert len(await service.list_stocks()) == 2


# --- adjust_funds ---

async def test_adjust_funds_adds_value(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    result = await service.adjust_funds(stock.stock_id, 50.0)
    assert result.value.current_value == pytest.approx(150.0)


async def test_adjust_funds_removing_everything_closes_position(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    result = await service.adjust_funds(stock.stock_id, -150.0)
    assert result == Success(value=None)
    assert await service.list_stocks() == []


async def test_adjust_funds_zero_records_zero_buy(service, etf):
    stock = (await service.add_stock(etf.bucket_id, "VTI", current_value=100.0)).value
    result = await service.adjust_funds(stock.stock_id, 0.0)
    assert isinstance(result, Success)
    assert result.value.current_value == pytest.approx(100.0)
    zero_buys = [
        t
        for t in await service.list_stock_transactions(stock.stock_id)
        if t.kind is TransactionKind.BUY and t.amount == 0.0
    ]
    assert len(zero_buys) == 1


async def test_adjust_funds_non_finite_rejected(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    result = await service.adjust_funds(stock.stock_id, float("nan"))
    assert result.error.code is ErrorCode.INVALID_AMOUNT
    assert (await service.list_stocks())[0].current_value == pytest.approx(100.0)


async def test_adjust_funds_missing_stock_is_not_found(service):
    result = await service.adjust_funds(uuid4(), 10.0)
    assert result.error.code is ErrorCode.STOCK_NOT_FOUND


# --- update_stock / set_stock_target ---

async def test_update_stock_value_records_add_funds(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    result = await service.update_stock(stock.model_copy(update={"current_value": 180.0}))
    assert result.value.current_value == pytest.approx(180.0)
    kinds = {t.kind: t.amount for t in await service.list_stock_transactions(stock.stock_id)}
    assert kinds[TransactionKind.ADD_FUNDS] == pytest.approx(80.0)


async def test_update_stock_to_zero_closes_position(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    result = await service.update_stock(stock.model_copy(update={"current_value": 0.0}))
    assert result == Success(value=None)
    assert await service.list_stocks() == []
    removals = [t for t in await service.list_transactions("VTI") if t.kind is TransactionKind.REMOVE_FUNDS]
    assert removals[0].amount == pytest.approx(-100.0)


async def test_update_stock_notes_only_records_nothing(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    result = await service.update_stock(stock.model_copy(update={"notes": "core holding"}))
    assert result.value.notes == "core holding"
    assert len(await service.list_transactions("VTI")) == 1


async def test_update_stock_can_move_between_buckets(service, etf):
    growth = (await service.add_bucket("Growth", 30.0)).value
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    await service.update_stock(stock.model_copy(update={"bucket_id": growth.bucket_id}))
    assert [s.symbol for s in await service.list_stocks(growth.bucket_id)] == ["VTI"]


async def test_update_stock_into_missing_bucket_is_not_found(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    result = await service.update_stock(stock.model_copy(update={"bucket_id": uuid4()}))
    assert result.error.code is ErrorCode.BUCKET_NOT_FOUND


async def test_set_stock_target_records_no_transaction(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    result = await service.set_stock_target(stock.stock_id, 65.0)
    assert result.value.target_percentage == 65.0
    assert len(await service.list_transactions("VTI")) == 1


async def test_set_stock_target_out_of_range_rejected(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    result = await service.set_stock_target(stock.stock_id, 120.0)
    assert result.error.code is ErrorCode.VALIDATION_FAILED


# --- delete_stock ---

async def test_delete_stock_keeps_history(service, etf):
    stock = (await service.buy(etf.bucket_id, "VTI", 100.0)).value
    assert isinstance(await service.delete_stock(stock.stock_id), Success)
    assert await service.list_stocks() == []
    assert len(await service.list_transactions("VTI")) == 1


async def test_delete_missing_stock_is_not_found(service):
    result = await service.delete_stock(uuid4())
    assert result.error.code is ErrorCode.STOCK_NOT_FOUND


# --- atomicity ---

async def test_failed_transaction_write_rolls_back_value_change(engine, service, etf):
    await service.buy(etf.bucket_id, "VTI", 100.0)
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE stock_transactions"))
    result = await service.buy(etf.bucket_id, "VTI", 50.0)
    assert isinstance(result, Failure)
    assert isinstance(result.error, StoreError)
    (stock,) = await service.list_stocks()
    assert stock.current_value == pytest.approx(100.0)
