"""Route Handler Adapters

Wraps FastAPI route functions so that every response leaves in the standard
envelope (see core.responses). Two handler styles are supported:

- throwing handlers return a plain value and raise AppError on failure
  (``api_handler``, ``paginated_api_handler``)
- Result handlers return ``Ok``/``Err`` (``result_handler``,
  ``paginated_result_handler``)

Success envelopes are returned as models and go out with the route's default
status. Failures are returned as a JSONResponse carrying ``error.status``.

Usage:
    @router.get("/{user_id}")
    @result_handler
    async def get_user(user_id: str, db: AsyncSession | None = Depends(get_db)):
        ...
        return await fetch_one(session, User, parsed_id, "User")

Also installs app-wide exception handlers (``register_error_handlers``) so
failures raised before a route runs use the same envelope.
"""
from __future__ import annotations

import inspect
from collections.abc import Mapping, Sequence
from functools import update_wrapper
from typing import Any, Awaitable, Callable, Protocol, get_type_hints

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger
from core.responses import (
    PaginationInfo,
    create_error_response,
    create_paginated_success_response,
    create_success_response,
)

from .builders import from_status, validation
from .result import Err, Ok, Result, to_app_error, try_catch
from .types import AppError

log = get_logger("errors.handlers")


class Issue(Protocol):
    message: str


class IssueCarrier(Protocol):
    """Any validator error exposing an ordered list of issues."""
    issues: Sequence[Issue]


# =============================================================================
# Exception Coercion
# =============================================================================

def _format_loc(loc: Sequence[str | int]) -> str:
    return ".".join(str(part) for part in loc)


def issue_messages(exc: object) -> list[str] | None:
    """Messages of a validator error, or None if ``exc`` is not one.

    Recognizes objects with an ``issues`` sequence whose items expose a
    ``message`` (attribute or key), and pydantic/FastAPI validation errors.
    """
    issues = getattr(exc, "issues", None)
    if isinstance(issues, Sequence) and not isinstance(issues, (str, bytes)):
        messages = []
        for issue in issues:
            if isinstance(issue, Mapping):
                message = issue.get("message")
            else:
                message = getattr(issue, "message", None)
            if not isinstance(message, str):
                return None
            messages.append(message)
        return messages

    if isinstance(exc, (PydanticValidationError, RequestValidationError)):
        messages = []
        for error in exc.errors():
            loc = _format_loc(error.get("loc", ()))
            msg = error.get("msg", "Invalid value")
            messages.append(f"{loc}: {msg}" if loc else msg)
        return messages

    return None


def coerce_exception(exc: Exception) -> AppError:
    """Turn anything a handler raised into an AppError.

    AppError passes through, validator errors become VALIDATION_ERROR,
    everything else becomes INTERNAL_SERVER_ERROR.
    """
    if isinstance(exc, AppError):
        return exc
    messages = issue_messages(exc)
    if messages is not None:
        return validation(", ".join(messages) or "Validation failed")
    return to_app_error(exc)


# =============================================================================
# Envelope Conversion
# =============================================================================

def error_response(error: AppError) -> JSONResponse:
    """Error envelope with the transport status taken from the error.

    Logs the failure exactly once. Internal errors coerced from a raised
    exception are logged as ``unhandled_exception`` with its traceback.
    """
    cause = error.__cause__
    if error.status >= 500 and cause is not None:
        log.error(
            "unhandled_exception",
            status=error.status,
            error_code=error.code,
            error_type=type(cause).__name__,
            error_message=error.message,
            exc_info=cause,
        )
    else:
        log_method = log.warning if error.status < 500 else log.error
        log_method(
            "error_response",
            status=error.status,
            error_code=error.code,
            message=error.message,
        )
    envelope = create_error_response(error.to_response())
    return JSONResponse(status_code=error.status, content=envelope.model_dump(mode="json"))


def result_to_response(result: Result[Any, AppError]) -> BaseModel | JSONResponse:
    """Convert a Result into a success envelope or an error response."""
    match result:
        case Ok(value):
            return create_success_response(value)
        case Err(error):
            return error_response(error)


def _paginated(value: Any) -> BaseModel:
    data, pagination = value
    if not isinstance(pagination, PaginationInfo):
        raise TypeError(
            f"Paginated handler must return (data, PaginationInfo), got {type(pagination).__name__}"
        )
    return create_paginated_success_response(data, pagination)


# =============================================================================
# Handler Invocation
# =============================================================================

async def _call(handler: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
    if inspect.iscoroutinefunction(handler):
        return await handler(*args, **kwargs)
    # plain def handlers run in the threadpool, off the event loop
    value = await run_in_threadpool(handler, *args, **kwargs)
    if inspect.isawaitable(value):
        value = await value
    return value


async def _run_throwing(thunk: Callable[[], Awaitable[Any]]) -> Result[Any, AppError]:
    try:
        return Ok(await thunk())
    except Exception as e:
        return Err(coerce_exception(e))


async def _run_result(thunk: Callable[[], Awaitable[Any]]) -> Result[Any, AppError]:
    async def unwrapped() -> Any:
        result = await thunk()
        if not isinstance(result, (Ok, Err)):
            raise TypeError(f"Result handler returned {type(result).__name__}, expected Ok or Err")
        return result.unwrap()

    return await try_catch(unwrapped)


def _endpoint_signature(handler: Callable[..., Any]) -> inspect.Signature:
    """Handler parameters with resolved annotations and no return annotation.

    FastAPI reads the endpoint signature for dependency injection; the
    return annotation is dropped so the handler's payload type is not
    mistaken for the response model.
    """
    signature = inspect.signature(handler)
    hints = get_type_hints(handler, include_extras=True)
    parameters = [
        param.replace(annotation=hints.get(name, param.annotation))
        for name, param in signature.parameters.items()
    ]
    return signature.replace(parameters=parameters, return_annotation=inspect.Signature.empty)


def adapt_handler(
    handler: Callable[..., Any],
    run: Callable[[Callable[[], Awaitable[Any]]], Awaitable[Result[Any, AppError]]],
    build: Callable[[Any], BaseModel],
) -> Callable[..., Awaitable[BaseModel | JSONResponse]]:
    """General adapter: ``run`` captures the outcome, ``build`` makes the envelope."""

    async def endpoint(*args: Any, **kwargs: Any) -> BaseModel | JSONResponse:
        outcome = await run(lambda: _call(handler, args, kwargs))
        match outcome:
            case Ok(value):
                try:
                    return build(value)
                except Exception as e:
                    return error_response(to_app_error(e))
            case Err(error):
                return error_response(error)

    update_wrapper(endpoint, handler)
    # FastAPI must read the signature below, not the handler's own
    del endpoint.__wrapped__
    endpoint.__signature__ = _endpoint_signature(handler)
    return endpoint


def api_handler(handler: Callable[..., Any]) -> Callable[..., Awaitable[BaseModel | JSONResponse]]:
    """Wrap a handler that returns data and raises on failure.

    Usage:
        @router.post("/")
        @api_handler
        async def create_user(payload: UserCreate, db=Depends(get_db)):
            if exists:
                raise conflict("Email already registered")
            return user
    """
    return adapt_handler(handler, _run_throwing, create_success_response)


def paginated_api_handler(handler: Callable[..., Any]) -> Callable[..., Awaitable[BaseModel | JSONResponse]]:
    """Like api_handler, for handlers returning ``(data, PaginationInfo)``."""
    return adapt_handler(handler, _run_throwing, _paginated)


def result_handler(handler: Callable[..., Any]) -> Callable[..., Awaitable[BaseModel | JSONResponse]]:
    """Wrap a handler returning ``Result[T, AppError]``.

    Exceptions escaping the handler are captured too and reported as
    INTERNAL_SERVER_ERROR unless they are already AppErrors.
    """
    return adapt_handler(handler, _run_result, create_success_response)


def paginated_result_handler(handler: Callable[..., Any]) -> Callable[..., Awaitable[BaseModel | JSONResponse]]:
    """Like result_handler, for ``Result[(data, PaginationInfo), AppError]``."""
    return adapt_handler(handler, _run_result, _paginated)


# =============================================================================
# App-wide Exception Handlers
# =============================================================================

async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """AppError raised outside an adapter, e.g. from a dependency."""
    return error_response(exc)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request parameters or body rejected before the route ran."""
    return error_response(coerce_exception(exc))


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Starlette HTTP errors (unknown route, method not allowed, ...)."""
    message = str(exc.detail) if exc.detail else f"HTTP {exc.status_code}"
    return error_response(from_status(exc.status_code, message))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all. Never exposes internals beyond the exception message."""
    return error_response(coerce_exception(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
