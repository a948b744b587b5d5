"""Stock position and transaction domain models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .buckets import utc_now
from .enums import TransactionKind


class Stock(BaseModel):
    """A single position held inside a bucket.

    current_value is the manually entered market value of the position.
    target_percentage is the desired share of the owning bucket (0–100).
    Symbols are normalised to upper case on construction.
    """

    stock_id: UUID = Field(default_factory=uuid4)
    bucket_id: UUID
    symbol: str = Field(min_length=1)
    name: str
    current_value: float = Field(ge=0.0)
    target_percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    shares: float | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.strip().upper()

    def matches(self, symbol: str) -> bool:
        """Case-insensitive ticker comparison."""
        return self.symbol == symbol.strip().upper()

    def touched(self, **changes: object) -> Stock:
        """Return a copy with ``changes`` applied and updated_at refreshed."""
        return self.model_copy(update={**changes, "updated_at": utc_now()})


class StockTransaction(BaseModel):
    """Append-only record of a change in a stock's value.

    amount is signed: positive for inflows (buy / add funds), negative for
    outflows (sell / remove funds). symbol is duplicated from the stock so the
    trail stays readable after the stock is deleted, at which point stock_id
    becomes None.
    """

    model_config = ConfigDict(frozen=True)

    transaction_id: UUID = Field(default_factory=uuid4)
    stock_id: UUID | None
    symbol: str
    amount: float
    kind: TransactionKind
    timestamp: datetime = Field(default_factory=utc_now)
