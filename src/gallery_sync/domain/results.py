"""Typed results for read paths that must not raise."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful read carrying its value."""

    value: T


@dataclass(frozen=True)
class Err:
    """Failed read carrying the exception that was logged."""

    error: Exception


Result = Ok[T] | Err
