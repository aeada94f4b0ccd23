"""Error Builders

One constructor per error kind. These are the only public way to build an
AppError, which keeps the emitted (status, code) pairs inside the taxonomy.
"""
from .types import AppError, ErrorKind


def bad_request(message: str) -> AppError:
    return AppError(ErrorKind.BAD_REQUEST, message)


def unauthorized(message: str) -> AppError:
    return AppError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str) -> AppError:
    return AppError(ErrorKind.FORBIDDEN, message)


def not_found(message: str) -> AppError:
    return AppError(ErrorKind.NOT_FOUND, message)


def conflict(message: str) -> AppError:
    return AppError(ErrorKind.CONFLICT, message)


def validation(message: str) -> AppError:
    return AppError(ErrorKind.VALIDATION, message)


def internal(message: str) -> AppError:
    return AppError(ErrorKind.INTERNAL, message)


def service_unavailable(message: str) -> AppError:
    return AppError(ErrorKind.SERVICE_UNAVAILABLE, message)


# Kind -> builder, used by code that only knows the kind (e.g. an HTTP status)
BUILDERS = {
    ErrorKind.BAD_REQUEST: bad_request,
    ErrorKind.UNAUTHORIZED: unauthorized,
    ErrorKind.FORBIDDEN: forbidden,
    ErrorKind.NOT_FOUND: not_found,
    ErrorKind.CONFLICT: conflict,
    ErrorKind.VALIDATION: validation,
    ErrorKind.INTERNAL: internal,
    ErrorKind.SERVICE_UNAVAILABLE: service_unavailable,
}


def from_status(status: int, message: str) -> AppError:
    """Build the error whose kind matches an HTTP status."""
    return BUILDERS[ErrorKind.from_status(status)](message)
