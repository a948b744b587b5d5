"""PortfolioService bucket operations against an in-memory ledger."""

from uuid import uuid4

import pytest
from sqlalchemy import text

from blueprint_tracker.domain.errors import ErrorCode, NotFoundError, StoreError, ValidationError
from blueprint_tracker.domain.result import Failure, Success


async def _add(service, name, target, **kwargs):
    result = await service.add_bucket(name, target, **kwargs)
    assert isinstance(result, Success), result
    return result.value


# --- add_bucket ---

async def test_add_bucket_fills_to_hundred(service):
    for name, target in [("ETF", 30.0), ("Growth", 30.0), ("Spec", 10.0)]:
        await _add(service, name, target)
    result = await service.add_bucket("Bonds", 30.0)
    assert isinstance(result, Success)
    assert sum(b.target_percentage for b in await service.list_buckets()) == pytest.approx(100.0)


async def test_add_bucket_beyond_hundred_rejected_without_write(service):
    for name, target in [("ETF", 30.0), ("Growth", 30.0), ("Spec", 10.0), ("Bonds", 30.0)]:
        await _add(service, name, target)
    result = await service.add_bucket("Extra", 5.0)
    assert isinstance(result, Failure)
    assert result.error.code is ErrorCode.TARGET_SUM_EXCEEDED
    assert len(await service.list_buckets()) == 4


async def test_add_bucket_out_of_range_target_is_validation_failure(service):
    result = await service.add_bucket("Huge", 150.0)
    assert isinstance(result, Failure)
    assert isinstance(result.error, ValidationError)
    assert result.error.code is ErrorCode.VALIDATION_FAILED
    assert result.error.field == "target_percentage"


async def test_add_bucket_appends_display_order(service):
    first = await _add(service, "ETF", 30.0)
    second = await _add(service, "Growth", 30.0)
    assert (first.display_order, second.display_order) == (1, 2)


async def test_add_bucket_after_delete_takes_next_free_display_order(service):
    first = await _add(service, "ETF", 20.0)
    middle = await _add(service, "DGIF", 20.0)
    last = await _add(service, "Growth", 20.0)
    await service.delete_bucket(middle.bucket_id)
    added = await _add(service, "Spec", 10.0)
    assert added.display_order == 4
    orders = [b.display_order for b in await service.list_buckets()]
    assert orders == [first.display_order, last.display_order, 4]
    assert len(set(orders)) == len(orders)


async def test_list_buckets_ordered_by_display_order(service):
    await _add(service, "Late", 10.0, display_order=5)
    await _add(service, "Early", 10.0, display_order=1)
    assert [b.name for b in await service.list_buckets()] == ["Early", "Late"]


async def test_get_bucket_missing_is_not_found(service):
    result = await service.get_bucket(uuid4())
    assert isinstance(result, Failure)
    assert isinstance(result.error, NotFoundError)
    assert result.error.code is ErrorCode.BUCKET_NOT_FOUND


async def test_get_bucket_round_trips_fields(service):
    bucket = await _add(service, "DGIF", 30.0, color="#34A853")
    result = await service.get_bucket(bucket.bucket_id)
    assert result.value.name == "DGIF"
    assert result.value.color == "#34A853"
    assert result.value.created_at == bucket.created_at


# --- update_bucket ---

async def test_update_bucket_does_not_check_total(service):
    etf = await _add(service, "ETF", 60.0)
    await _add(service, "Growth", 40.0)
    result = await service.update_bucket(etf.model_copy(update={"target_percentage": 80.0}))
    assert isinstance(result, Success)
    assert sum(b.target_percentage for b in await service.list_buckets()) == pytest.approx(120.0)


async def test_update_bucket_refreshes_updated_at(service):
    etf = await _add(service, "ETF", 60.0)
    result = await service.update_bucket(etf.model_copy(update={"name": "Index"}))
    assert result.value.updated_at >= etf.updated_at
    assert (await service.get_bucket(etf.bucket_id)).value.name == "Index"


async def test_update_missing_bucket_is_not_found(service):
    etf = await _add(service, "ETF", 60.0)
    await service.delete_bucket(etf.bucket_id)
    result = await service.update_bucket(etf)
    assert isinstance(result, Failure)
    assert result.error.code is ErrorCode.BUCKET_NOT_FOUND


# --- update_all_buckets ---

async def test_bulk_update_accepts_complete_allocation(service):
    etf = await _add(service, "ETF", 50.0)
    growth = await _add(service, "Growth", 50.0)
    result = await service.update_all_buckets(
        [
            etf.model_copy(update={"target_percentage": 70.0}),
            growth.model_copy(update={"target_percentage": 30.0}),
        ]
    )
    assert isinstance(result, Success)
    assert [b.target_percentage for b in await service.list_buckets()] == [70.0, 30.0]


async def test_bulk_update_incomplete_allocation_leaves_state_unchanged(service):
    etf = await _add(service, "ETF", 50.0)
    growth = await _add(service, "Growth", 50.0)
    before = await service.list_buckets()
    result = await service.update_all_buckets(
        [
            etf.model_copy(update={"target_percentage": 60.0}),
            growth.model_copy(update={"target_percentage": 39.5}),
        ]
    )
    assert isinstance(result, Failure)
    assert result.error.code is ErrorCode.TARGET_SUM_NOT_COMPLETE
    assert await service.list_buckets() == before


async def test_bulk_update_counts_buckets_outside_the_batch(service):
    etf = await _add(service, "ETF", 50.0)
    await _add(service, "Growth", 50.0)
    result = await service.update_all_buckets([etf.model_copy(update={"target_percentage": 40.0})])
    assert isinstance(result, Failure)


async def test_bulk_update_unknown_bucket_is_not_found(service):
    etf = await _add(service, "ETF", 100.0)
    await service.delete_bucket(etf.bucket_id)
    result = await service.update_all_buckets([etf])
    assert isinstance(result, Failure)
    assert result.error.code is ErrorCode.BUCKET_NOT_FOUND


# --- delete_bucket ---

async def test_delete_bucket_cascades_to_stocks(service):
    etf = await _add(service, "ETF", 30.0)
    await service.buy(etf.bucket_id, "VTI", 1000.0)
    result = await service.delete_bucket(etf.bucket_id)
    assert isinstance(result, Success)
    assert await service.list_buckets() == []
    assert await service.list_stocks() == []


async def test_delete_bucket_keeps_transactions(service):
    etf = await _add(service, "ETF", 30.0)
    await service.buy(etf.bucket_id, "VTI", 1000.0)
    await service.delete_bucket(etf.bucket_id)
    (txn,) = await service.list_transactions("VTI")
    assert txn.stock_id is None


async def test_delete_missing_bucket_is_not_found(service):
    result = await service.delete_bucket(uuid4())
    assert isinstance(result, Failure)
    assert result.error.code is ErrorCode.BUCKET_NOT_FOUND


# --- store failures ---

async def test_database_failure_is_returned_as_store_error(engine, service):
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE bucket_snapshots"))
        await conn.execute(text("DROP TABLE buckets"))
    result = await service.add_bucket("ETF", 30.0)
    assert isinstance(result, Failure)
    assert isinstance(result.error, StoreError)
    assert result.error.code is ErrorCode.STORE_FAILED
    assert result.error.operation == "add bucket"
