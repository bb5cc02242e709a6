"""Success/failure values returned across I/O boundaries."""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

from map_elevation.exceptions import AppError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Outcome of an I/O call: a value, or an error kind with a diagnostic."""

    value: T | None = None
    error: ErrorKind | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, detail: str = "") -> "Result[T]":
        return cls(error=error, detail=detail)

    def unwrap_or(self, default: T) -> T:
        """Return the value when successful, otherwise ``default``."""
        if self.ok and self.value is not None:
            return self.value
        return default


async def capture(call: Awaitable[T]) -> Result[T]:
    """Await ``call`` and convert an application error into a failed Result.

    Only ``AppError`` is converted; anything else is a programming error and
    propagates.
    """
    try:
        return Result.success(await call)
    except AppError as exc:
        return Result.failure(exc.kind, str(exc))
