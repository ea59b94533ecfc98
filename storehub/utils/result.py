"""
Result type for explicit error handling at API call sites.

A gateway call either yields a value (Ok) or the exception that stopped it
(Err). The reconciliation controller keeps both halves of a save (update,
then re-fetch) as Results so it can pick an outcome without nested
try/except blocks.

Usage:
    from storehub.utils.result import Ok, Err

    result = await attempt(gateway.get_order, "ORD-1")
    if result.is_ok():
        snapshot = result.unwrap()
    else:
        logger.warning(f"Fetch failed: {result.error}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """The call returned ``value``."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    @property
    def error(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """The call raised ``error``."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> None:
        """Re-raise the captured exception (ValueError for non-exception errors)."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Called unwrap() on Err: {self.error}")

    @property
    def value(self) -> None:
        return None


Result = Union[Ok[T], Err[E]]


async def attempt(
    f: Callable[..., Awaitable[T]],
    *args: Any,
    error_type: type[BaseException] = Exception,
) -> "Result[T, BaseException]":
    """
    Await ``f(*args)`` and capture exceptions of error_type as Err.

    Anything else (programming errors, CancelledError) propagates.
    """
    try:
        return Ok(await f(*args))
    except error_type as e:
        return Err(e)
