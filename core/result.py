"""Outcome values for use cases and session events.

Expected failures (nothing found, no grade heard, file locked) travel back
as ``Failure`` holding a ``GradingException``; callers branch on
``is_failure()`` instead of catching.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    error: E

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self):
        """Re-raise the carried error."""
        raise self.error


Result = Union[Success[T], Failure[E]]
