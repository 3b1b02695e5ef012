from __future__ import annotations
"""Minimal Result dataclass capturing success or failure.

The retry loop produces a ``Result`` per attempt instead of letting the
exception unwind, so attempt bookkeeping stays an explicit loop.
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

__all__ = ["Result"]


@dataclass(slots=True)
class Result(Generic[T]):  # noqa: D101
    value: Optional[T] = None
    error: Optional[Exception] = None
    attempts: int = 0

    # ------------------------------------------------------------------ #
    @property
    def ok(self) -> bool:  # noqa: D401
        """Return True when *error* is None."""
        return self.error is None

    # Convenience constructors ----------------------------------------- #
    @staticmethod
    def success(val: T, attempts: int = 1) -> "Result[T]":  # noqa: D401
        return Result(value=val, attempts=attempts)

    @staticmethod
    def failure(err: Exception, attempts: int = 1) -> "Result[None]":  # noqa: D401
        return Result(error=err, attempts=attempts)
