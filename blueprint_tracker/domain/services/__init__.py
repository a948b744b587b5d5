"""Domain services package."""

from .allocation import AllocationService
from .snapshots import SnapshotService
from .transactions import TransactionRecorder, ValueChange
from .validation import AllocationValidator

__all__ = [
    "AllocationService",
    "AllocationValidator",
    "SnapshotService",
    "TransactionRecorder",
    "ValueChange",
]
