"""Tests for the ledger and snapshot domain models."""

from datetime import timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from blueprint_tracker.domain.models.buckets import Bucket
from blueprint_tracker.domain.models.enums import TransactionKind
from blueprint_tracker.domain.models.snapshots import BucketSnapshot, PortfolioSnapshot
from blueprint_tracker.domain.models.stocks import Stock, StockTransaction


# --- Bucket ---

def test_bucket_construction():
    bucket = Bucket(name="ETF", target_percentage=30.0)
    assert bucket.target_percentage == 30.0


def test_bucket_id_auto_generated():
    assert Bucket(name="ETF", target_percentage=30.0).bucket_id is not None


def test_bucket_timestamps_are_utc():
    assert Bucket(name="ETF", target_percentage=30.0).created_at.tzinfo == timezone.utc


def test_bucket_target_above_hundred_raises():
    with pytest.raises(ValidationError):
        Bucket(name="Too much", target_percentage=100.5)


def test_bucket_target_below_zero_raises():
    with pytest.raises(ValidationError):
        Bucket(name="Negative", target_percentage=-1.0)


def test_bucket_empty_name_raises():
    with pytest.raises(ValidationError):
        Bucket(name="", target_percentage=10.0)


def test_bucket_touched_applies_changes_and_refreshes_updated_at():
    bucket = Bucket(name="ETF", target_percentage=30.0)
    edited = bucket.touched(target_percentage=40.0)
    assert edited.target_percentage == 40.0
    assert edited.updated_at >= bucket.updated_at
    assert edited.bucket_id == bucket.bucket_id


# --- Stock ---

def test_stock_symbol_normalised_to_upper_case():
    stock = Stock(bucket_id=uuid4(), symbol=" vti ", name="Vanguard", current_value=10.0)
    assert stock.symbol == "VTI"


def test_stock_target_defaults_to_zero():
    stock = Stock(bucket_id=uuid4(), symbol="VTI", name="Vanguard", current_value=10.0)
    assert stock.target_percentage == 0.0


def test_stock_optional_fields_default_none():
    stock = Stock(bucket_id=uuid4(), symbol="VTI", name="Vanguard", current_value=10.0)
    assert stock.shares is None
    assert stock.notes is None


def test_stock_negative_value_raises():
    with pytest.raises(ValidationError):
        Stock(bucket_id=uuid4(), symbol="VTI", name="Vanguard", current_value=-1.0)


def test_stock_matches_is_case_insensitive():
    stock = Stock(bucket_id=uuid4(), symbol="VTI", name="Vanguard", current_value=10.0)
    assert stock.matches("vti")
    assert not stock.matches("VXUS")


# --- StockTransaction ---

def test_transaction_is_frozen():
    txn = StockTransaction(stock_id=uuid4(), symbol="VTI", amount=10.0, kind=TransactionKind.BUY)
    with pytest.raises(ValidationError):
        txn.amount = 20.0  # type: ignore[misc]


def test_transaction_allows_detached_stock():
    txn = StockTransaction(stock_id=None, symbol="VTI", amount=-10.0, kind=TransactionKind.SELL)
    assert txn.stock_id is None


# --- PortfolioSnapshot ---

def test_snapshot_with_matching_bucket_rows_valid():
    sid = uuid4()
    snap = PortfolioSnapshot(
        snapshot_id=sid,
        total_value=100.0,
        buckets=[
            BucketSnapshot(
                snapshot_id=sid,
                bucket_id=uuid4(),
                total_value=100.0,
                actual_percentage=100.0,
                target_percentage=60.0,
            )
        ],
    )
    assert len(snap.buckets) == 1


def test_snapshot_with_foreign_bucket_row_raises():
    with pytest.raises(ValidationError):
        PortfolioSnapshot(
            total_value=100.0,
            buckets=[
                BucketSnapshot(
                    snapshot_id=uuid4(),
                    bucket_id=uuid4(),
                    total_value=100.0,
                    actual_percentage=100.0,
                    target_percentage=60.0,
                )
            ],
        )
