"""Result type for outcomes that may fail or degrade without raising.

The identity crosswalk and the per-league roster fetches report their outcome
as ``Ok``/``Err`` values instead of raising, so callers decide whether an
error is fatal, skipped, or merely degrades the run.

Usage:
    result = await fetch_identifier_map(client)
    id_map = result.unwrap_or({})
    if result.is_err():
        logger.warning("Enrichment degraded: %s", result.unwrap_err())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, final

T = TypeVar("T")
E = TypeVar("E", bound=Exception)
_T = TypeVar("_T")


class UnwrapError(Exception):
    """Raised when unwrap() is called on an Err or unwrap_err() on an Ok."""


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful outcome carrying a value."""

    _value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self._value

    def unwrap_or(self, default: T) -> T:
        return self._value

    def unwrap_err(self) -> Exception:
        raise UnwrapError("Called unwrap_err on Ok value")


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed outcome carrying the exception that caused it."""

    _error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> _T:  # noqa: UP049 # pyright: ignore[reportInvalidTypeVarUse]
        """Raises UnwrapError chained to the contained error."""
        raise UnwrapError(f"Called unwrap on Err value: {self._error}") from self._error

    def unwrap_or(self, default: _T) -> _T:  # noqa: UP049
        return default

    def unwrap_err(self) -> E:
        return self._error


Result = Ok[T] | Err[E]
