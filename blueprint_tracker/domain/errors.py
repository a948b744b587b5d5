"""Domain errors carried inside ``Failure`` results.

Error hierarchy:
    DomainError (base, does NOT inherit from Exception)
    ├── ValidationError (allocation-sum violations, bad inputs)
    ├── NotFoundError   (referenced bucket / stock absent)
    └── StoreError      (wrapped persistence failure)

A failed mutation never leaves partial state behind: the unit of work that
produced the error is rolled back, or no write was attempted.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes (ENTITY_ACTION_REASON naming)."""

    # Validation errors
    TARGET_SUM_EXCEEDED = "target_sum_exceeded"
    TARGET_SUM_NOT_COMPLETE = "target_sum_not_complete"
    INVALID_AMOUNT = "invalid_amount"
    VALIDATION_FAILED = "validation_failed"

    # Resource errors
    BUCKET_NOT_FOUND = "bucket_not_found"
    STOCK_NOT_FOUND = "stock_not_found"

    # Persistence errors
    STORE_FAILED = "store_failed"


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable reason, suitable for display.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input or invariant validation failure. No mutation was performed."""

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Referenced resource is absent; the operation became a no-op."""

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class StoreError(DomainError):
    """Underlying persistence failure, wrapped for the caller."""

    operation: str
