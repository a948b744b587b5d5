"""Domain enumerations for the portfolio ledger.

All string-valued enums use the str mixin so they persist as plain text and
compare equal to their string values.
"""

from enum import Enum


class TransactionKind(str, Enum):
    """Kind of value change recorded in the transaction trail."""

    BUY = "BUY"
    SELL = "SELL"
    ADD_FUNDS = "ADD_FUNDS"
    REMOVE_FUNDS = "REMOVE_FUNDS"


class TradeSide(str, Enum):
    """Direction of a trade entered by ticker symbol."""

    BUY = "buy"
    SELL = "sell"


class TimeRange(str, Enum):
    """Preset look-back windows for historical allocation charts."""

    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"
    NINETY_DAYS = "90d"
    ONE_YEAR = "1y"

    @property
    def days(self) -> int:
        """Number of days covered by this window."""
        return {
            TimeRange.SEVEN_DAYS: 7,
            TimeRange.THIRTY_DAYS: 30,
            TimeRange.NINETY_DAYS: 90,
            TimeRange.ONE_YEAR: 365,
        }[self]
