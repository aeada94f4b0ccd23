"""Error Handling System

Key components:
- Result[T, E]: Ok/Err container for success/failure
- AppError: uniform error (status, code, message, timestamp)
- ErrorKind: the closed (status, code) taxonomy
- Builders: one constructor per error kind
- Handler adapters: turn route functions into envelope-producing endpoints

Usage:
    from core.errors import ok, err, not_found, result_handler

    @router.get("/{item_id}")
    @result_handler
    async def get_item(item_id: int):
        item = await repo.get(item_id)
        if item is None:
            return err(not_found("Item not found"))
        return ok(item)
"""
from .types import (
    AppError,
    ErrorInfo,
    ErrorKind,
    utc_timestamp,
)

from .result import (
    Result,
    Ok,
    Err,
    Partitioned,
    ok,
    err,
    is_ok,
    is_err,
    to_app_error,
    try_catch,
    try_result,
    collect,
    partition,
    ensure,
    require,
)

from .builders import (
    bad_request,
    unauthorized,
    forbidden,
    not_found,
    conflict,
    validation,
    internal,
    service_unavailable,
    from_status,
)

from .boundaries import (
    DatabaseErrorMapper,
    map_errors,
    map_db_errors,
)

from .handlers import (
    Issue,
    IssueCarrier,
    adapt_handler,
    api_handler,
    paginated_api_handler,
    result_handler,
    paginated_result_handler,
    coerce_exception,
    issue_messages,
    error_response,
    result_to_response,
    register_error_handlers,
)

__all__ = [
    # Core types
    "AppError",
    "ErrorInfo",
    "ErrorKind",
    "utc_timestamp",
    # Result
    "Result",
    "Ok",
    "Err",
    "Partitioned",
    "ok",
    "err",
    "is_ok",
    "is_err",
    "to_app_error",
    "try_catch",
    "try_result",
    "collect",
    "partition",
    "ensure",
    "require",
    # Builders
    "bad_request",
    "unauthorized",
    "forbidden",
    "not_found",
    "conflict",
    "validation",
    "internal",
    "service_unavailable",
    "from_status",
    # Boundary mappers
    "DatabaseErrorMapper",
    "map_errors",
    "map_db_errors",
    # Handlers
    "Issue",
    "IssueCarrier",
    "adapt_handler",
    "api_handler",
    "paginated_api_handler",
    "result_handler",
    "paginated_result_handler",
    "coerce_exception",
    "issue_messages",
    "error_response",
    "result_to_response",
    "register_error_handlers",
]
