"""Bucket domain model.

A Bucket is a named grouping (typically an asset class) with a target share of
the whole portfolio. The sum of all bucket targets is kept consistent by
AllocationValidator, not by the model itself: a single bucket cannot know its
siblings.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Bucket(BaseModel):
    """A target allocation bucket.

    target_percentage is expressed in percent (0–100), not as a fraction.
    """

    bucket_id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1)
    target_percentage: float = Field(ge=0.0, le=100.0)
    color: str = "#4285F4"
    display_order: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def touched(self, **changes: object) -> Bucket:
        """Return a copy with ``changes`` applied and updated_at refreshed."""
        return self.model_copy(update={**changes, "updated_at": utc_now()})
