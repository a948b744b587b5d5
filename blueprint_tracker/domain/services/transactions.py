"""Transaction recorder: value changes and their audit entries.

Every change to a stock's current value yields exactly one StockTransaction
whose signed amount is the requested change, not the resulting balance.
New values are floored at zero; a position that lands on zero is closed by
the caller (deleted) after its transaction is written.
"""

from __future__ import annotations

from dataclasses import dataclass

from blueprint_tracker.domain.models.enums import TradeSide, TransactionKind
from blueprint_tracker.domain.models.stocks import Stock, StockTransaction


@dataclass(frozen=True)
class ValueChange:
    """A stock with its new value applied, plus the transaction describing it."""

    stock: Stock
    transaction: StockTransaction

    @property
    def closes_position(self) -> bool:
        return self.stock.current_value <= 0


class TransactionRecorder:
    """Derives (new stock state, transaction) pairs for value-changing operations."""

    def open_position(self, stock: Stock) -> StockTransaction:
        """BUY for the full initial value of a newly created stock."""
        return self._entry(stock, stock.current_value, TransactionKind.BUY)

    def trade(self, stock: Stock, delta: float, side: TradeSide) -> ValueChange:
        """Buy or sell ``delta`` worth of an existing position."""
        signed = delta if side is TradeSide.BUY else -delta
        kind = TransactionKind.BUY if side is TradeSide.BUY else TransactionKind.SELL
        return self._apply(stock, signed, kind)

    def adjust_funds(self, stock: Stock, amount: float) -> ValueChange:
        """Add (amount ≥ 0) or remove (amount < 0) funds from a position."""
        kind = TransactionKind.BUY if amount >= 0 else TransactionKind.SELL
        return self._apply(stock, amount, kind)

    def edit(self, current: Stock, proposed: Stock) -> ValueChange | None:
        """Describe a direct value edit; None when the value did not change."""
        delta = proposed.current_value - current.current_value
        if delta == 0:
            return None
        kind = TransactionKind.ADD_FUNDS if delta > 0 else TransactionKind.REMOVE_FUNDS
        updated = proposed.touched(current_value=max(proposed.current_value, 0.0))
        return ValueChange(stock=updated, transaction=self._entry(updated, delta, kind))

    def _apply(self, stock: Stock, amount: float, kind: TransactionKind) -> ValueChange:
        new_value = max(stock.current_value + amount, 0.0)
        updated = stock.touched(current_value=new_value)
        return ValueChange(stock=updated, transaction=self._entry(updated, amount, kind))

    @staticmethod
    def _entry(stock: Stock, amount: float, kind: TransactionKind) -> StockTransaction:
        return StockTransaction(
            stock_id=stock.stock_id,
            symbol=stock.symbol,
            amount=amount,
            kind=kind,
            timestamp=stock.updated_at,
        )
