"""Result types for operations that can fail without raising.

Mutating portfolio operations return ``Success`` or ``Failure`` so callers
decide how to present rejections:

    result = await service.add_bucket("Bonds", 30.0, "#0F9D58")
    match result:
        case Success(value=bucket):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """A successful operation result."""

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """A failed operation result carrying the error value."""

    error: E


Result = Success[T] | Failure[E]
