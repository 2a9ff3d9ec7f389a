"""Result values reported by background operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar


T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Result(Generic[T, E]):
    """Either the outcome of an operation or the reason it failed.

    Results cross thread boundaries inside channel messages, so they are
    immutable and compare by value.
    """

    value: Optional[T] = None
    error: Optional[E] = None
    succeeded: bool = True

    @classmethod
    def ok(cls, value: T) -> "Result[T, E]":
        return cls(value=value)

    @classmethod
    def err(cls, error: E) -> "Result[T, E]":
        return cls(error=error, succeeded=False)

    def is_ok(self) -> bool:
        return self.succeeded

    def is_err(self) -> bool:
        return not self.succeeded

    def unwrap(self) -> T:
        if not self.succeeded:
            raise RuntimeError(f"Tried to unwrap error result: {self.error}")
        return self.value  # type: ignore[return-value]

    def unwrap_err(self) -> E:
        if self.succeeded:
            raise RuntimeError("Tried to unwrap the error of a successful result")
        return self.error  # type: ignore[return-value]


__all__ = ["Result"]
