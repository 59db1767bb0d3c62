"""
Explicit success / failure values returned by storage helpers and flows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from core.errors import ApiError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ApiError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
