"""Error Boundary Mappers

Maps exceptions from the persistence layer onto the error taxonomy at the
module boundary, so Result-returning repository functions only ever hand
AppErrors to their callers.
"""
from __future__ import annotations

from functools import wraps
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)

from core.logging import db_logger

from .builders import conflict, internal, service_unavailable
from .result import Err, Result
from .types import AppError

T = TypeVar("T")

log = db_logger()


class DatabaseErrorMapper:
    """Maps SQLAlchemy exceptions to AppErrors.

    Driver messages are logged, not returned: they can leak table and
    constraint names.
    """

    def __init__(self, origin: str = "database"):
        self.origin = origin

    def map_exception(self, exc: Exception) -> AppError:
        if isinstance(exc, AppError):
            return exc
        if isinstance(exc, IntegrityError):
            return self._map_integrity_error(exc)
        if isinstance(exc, OperationalError) or (
            isinstance(exc, DBAPIError) and exc.connection_invalidated
        ):
            log.error("database_unavailable", origin=self.origin, error=str(exc.orig or exc))
            return service_unavailable("Database not available")
        if isinstance(exc, SQLAlchemyError):
            log.error("database_error", origin=self.origin, error=str(exc))
            return internal("Database operation failed")
        log.error("unexpected_database_error", origin=self.origin, error_type=type(exc).__name__)
        return internal(str(exc) or type(exc).__name__)

    def _map_integrity_error(self, exc: IntegrityError) -> AppError:
        message = str(exc.orig) if exc.orig else str(exc)
        log.warning("integrity_error", origin=self.origin, error=message)
        lowered = message.lower()
        if "unique" in lowered or "duplicate key" in lowered:
            return conflict("Resource already exists")
        if "foreign key" in lowered:
            return conflict("Referenced resource does not exist")
        return conflict("Constraint violation")


def map_errors(mapper: DatabaseErrorMapper):
    """Decorator: exceptions raised by a Result-returning coroutine become Err.

    Usage:
        @map_errors(DatabaseErrorMapper("user_repository"))
        async def get_user(session, user_id) -> Result[User, AppError]:
            ...
    """
    def decorator(fn: Callable[..., Awaitable[Result[T, AppError]]]):
        @wraps(fn)
        async def wrapper(*args, **kwargs) -> Result[T, AppError]:
            try:
                return await fn(*args, **kwargs)
            except Exception as e:
                return Err(mapper.map_exception(e))
        return wrapper
    return decorator


def map_db_errors(origin: str = "database"):
    """Convenience decorator for database error mapping."""
    return map_errors(DatabaseErrorMapper(origin))
