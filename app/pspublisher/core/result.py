"""Result type for explicit error handling in the publishing workflow.

Each workflow step returns either ``Ok(value)`` or ``Err(error)`` instead
of terminating the process. A single top-level caller decides what a
failure means (rollback, exit code).

Usage:
    result = session.upload_apk(path)
    match result:
        case Ok(upload):
            print(upload.version_code)
        case Err(error):
            print(error)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Apply a function to the contained value."""
        return Ok(f(self.value))


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def map(self, f: Callable[[T], U]) -> Err[E]:
        return self


Result = Ok[T] | Err[E]
