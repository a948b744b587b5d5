"""Consistency rules for bucket target percentages.

Checks run against the proposed post-state before anything is written:

- single insert: existing total + new target must not exceed 100.
- single update: unchecked. Adjusting several buckets at once goes through
  the bulk path, so an individual edit may pass through an interim state
  above 100.
- bulk replace: the proposed targets must total 100 within ±0.001.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from blueprint_tracker.domain.errors import ErrorCode, ValidationError
from blueprint_tracker.domain.models.buckets import Bucket
from blueprint_tracker.domain.result import Failure, Result, Success

logger = logging.getLogger(__name__)

MAX_TOTAL_PERCENTAGE = 100.0
BULK_TOLERANCE = 0.001


class AllocationValidator:
    """Accepts or rejects proposed bucket targets and trade amounts."""

    def check_insert(
        self, existing_total: float, bucket: Bucket
    ) -> Result[None, ValidationError]:
        proposed = existing_total + bucket.target_percentage
        if proposed > MAX_TOTAL_PERCENTAGE:
            logger.warning(
                "Rejected bucket %r: target total would be %.3f%%", bucket.name, proposed
            )
            return Failure(
                error=ValidationError(
                    code=ErrorCode.TARGET_SUM_EXCEEDED,
                    message=(
                        f"Total target percentage exceeds 100% "
                        f"({existing_total:g}% allocated, {bucket.target_percentage:g}% requested)"
                    ),
                    field="target_percentage",
                    details={"proposed_total": f"{proposed:.3f}"},
                )
            )
        return Success(value=None)

    def check_bulk(self, buckets: Sequence[Bucket]) -> Result[None, ValidationError]:
        proposed = sum(b.target_percentage for b in buckets)
        if not math.isclose(proposed, MAX_TOTAL_PERCENTAGE, rel_tol=0.0, abs_tol=BULK_TOLERANCE):
            logger.warning("Rejected bulk bucket update: targets total %.3f%%", proposed)
            return Failure(
                error=ValidationError(
                    code=ErrorCode.TARGET_SUM_NOT_COMPLETE,
                    message=f"Bucket targets must total 100%, got {proposed:.3f}%",
                    field="target_percentage",
                    details={"proposed_total": f"{proposed:.3f}"},
                )
            )
        return Success(value=None)

    def check_amount(self, amount: float, field: str = "amount") -> Result[None, ValidationError]:
        """Trade deltas are entered as positive magnitudes."""
        if not math.isfinite(amount) or amount <= 0:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_AMOUNT,
                    message=f"{field} must be a positive number, got {amount!r}",
                    field=field,
                )
            )
        return Success(value=None)

    def check_finite(self, amount: float, field: str = "amount") -> Result[None, ValidationError]:
        """Signed adjustments accept any real number, zero included."""
        if not math.isfinite(amount):
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_AMOUNT,
                    message=f"{field} must be a finite number, got {amount!r}",
                    field=field,
                )
            )
        return Success(value=None)
