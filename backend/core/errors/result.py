"""Result Monad

Ok/Err variants for making failure an explicit return value instead of a
raised exception. Variants are frozen; every combinator returns a Result and
never mutates its input. A passed-through variant is returned as the same
instance, so ``err(e).map(f) is`` the original Err.

Usage:
    from core.errors import Ok, Err, Result, ok, err, not_found

    def find_user(user_id: int) -> Result[User, AppError]:
        user = repo.get(user_id)
        if user is None:
            return err(not_found("User not found"))
        return ok(user)

    match find_user(1):
        case Ok(user):
            ...
        case Err(error):
            ...
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING, Callable, Generic, Iterable, NamedTuple, NoReturn,
    TypeVar, Union, final,
)

from .types import AppError, ErrorKind

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant."""
    value: T

    @property
    def ok(self) -> bool:
        return True

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok: {self.value!r}")

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return Ok(f(self.value))

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        return self  # type: ignore

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return f(self.value)

    def or_(self, other: Result[T, E]) -> Result[T, E]:
        return self

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        return self  # type: ignore

    def match(self, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        return ok(self.value)

    async def map_async(self, f: Callable[[T], Awaitable[U]]) -> Result[U, E]:
        return Ok(await f(self.value))

    async def and_then_async(
        self, f: Callable[[T], Awaitable[Result[U, E]]]
    ) -> Result[U, E]:
        return await f(self.value)


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant."""
    error: E

    @property
    def ok(self) -> bool:
        return False

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise the contained error.

        Non-exception errors cannot be raised as-is and are reported
        through ValueError instead.
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Called unwrap on Err: {self.error!r}")

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        return f(self.error)

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return self  # type: ignore

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        return Err(f(self.error))

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return self  # type: ignore

    def or_(self, other: Result[T, E]) -> Result[T, E]:
        return other

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        return f(self.error)

    def match(self, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        return err(self.error)

    async def map_async(self, f: Callable[[T], Awaitable[U]]) -> Result[U, E]:
        return self  # type: ignore

    async def and_then_async(
        self, f: Callable[[T], Awaitable[Result[U, E]]]
    ) -> Result[U, E]:
        return self  # type: ignore


Result = Union[Ok[T], Err[E]]


class Partitioned(NamedTuple, Generic[T, E]):
    """Both channels of a list of Results, in order of appearance."""
    ok: list[T]
    err: list[E]


def ok(value: T) -> Ok[T]:
    return Ok(value)


def err(error: E) -> Err[E]:
    return Err(error)


def is_ok(result: Result[T, E]) -> bool:
    return result.is_ok()


def is_err(result: Result[T, E]) -> bool:
    return result.is_err()


def to_app_error(exc: Exception) -> AppError:
    """Coerce a raised exception into an AppError.

    AppErrors pass through untouched; anything else becomes an internal
    error carrying the exception's message, chained to the exception so
    its traceback can be logged where the response is built.
    """
    if isinstance(exc, AppError):
        return exc
    error = AppError(ErrorKind.INTERNAL, str(exc) or type(exc).__name__)
    error.__cause__ = exc
    return error


async def try_catch(f: Callable[[], Awaitable[T]]) -> Result[T, AppError]:
    """Await ``f()`` and capture a raised exception as Err."""
    try:
        return Ok(await f())
    except Exception as e:
        return Err(to_app_error(e))


def try_result(f: Callable[[], T]) -> Result[T, AppError]:
    """Synchronous variant of try_catch."""
    try:
        return Ok(f())
    except Exception as e:
        return Err(to_app_error(e))


def collect(results: Iterable[Result[T, E]]) -> Result[list[T], E]:
    """Sequence Results, failing fast on the first Err."""
    values: list[T] = []
    for r in results:
        match r:
            case Ok(v):
                values.append(v)
            case Err():
                return r
    return Ok(values)


def partition(results: Iterable[Result[T, E]]) -> Partitioned[T, E]:
    """Split Results into success values and errors. Never short-circuits."""
    values: list[T] = []
    errors: list[E] = []
    for r in results:
        match r:
            case Ok(v):
                values.append(v)
            case Err(e):
                errors.append(e)
    return Partitioned(ok=values, err=errors)


def ensure(condition: bool, error: E) -> Result[None, E]:
    """Guard that returns Err if condition is False."""
    return Ok(None) if condition else Err(error)


def require(value: T | None, error: E) -> Result[T, E]:
    """Convert a nullable into a Result, Err when None."""
    return Ok(value) if value is not None else Err(error)
