"""Result values for expected, recoverable failures.

Domain operations never raise for rule violations. They return ``Ok``
wrapping the new value or ``Err`` wrapping a typed error describing
exactly why the operation was rejected.

Example:
    >>> result = Period.create(start, end, today)
    >>> if result.is_err:
    ...     return render(result.error)
    >>> period = result.value
"""
from dataclasses import dataclass
from typing import Any, Callable, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


class UnwrapError(Exception):
    """Raised when a value is unwrapped from the wrong side of a result."""

    def __init__(self, result: Any, message: str):
        super().__init__(message)
        self.result = result


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying the produced value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise UnwrapError(self, f"Called unwrap_err on {self!r}")

    def map(self, func: Callable[[T], U]) -> "Ok[U]":
        return Ok(func(self.value))

    def map_err(self, func: Callable[[Any], F]) -> "Ok[T]":
        return self

    def and_then(self, func: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        return func(self.value)


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying the error value."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise UnwrapError(self, f"Called unwrap on {self!r}")

    def unwrap_err(self) -> E:
        return self.error

    def map(self, func: Callable[[Any], U]) -> "Err[E]":
        return self

    def map_err(self, func: Callable[[E], F]) -> "Err[F]":
        return Err(func(self.error))

    def and_then(self, func: Callable[[Any], "Result[U, E]"]) -> "Err[E]":
        return self


Result = Union[Ok[T], Err[E]]
