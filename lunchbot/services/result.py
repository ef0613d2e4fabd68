from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

EMPTY_NAME = "empty_name"
NAME_TOO_LONG = "name_too_long"
DUPLICATE = "duplicate"
NOT_FOUND = "not_found"


@dataclass
class Result(Generic[T]):
    """Outcome of a store mutation; validation failures carry an error_code instead of raising."""

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(ok=True, value=value)

    @staticmethod
    def failure(error: str, code: str = "unknown") -> "Result[T]":
        return Result(ok=False, error=error, error_code=code)
