"""Application Error Types

A closed taxonomy of error kinds. Each kind carries exactly one HTTP status
and one machine-readable code, so an AppError can only ever emit one of the
(status, code) pairs listed in ErrorKind.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from core.responses import ErrorInfo, utc_timestamp


class ErrorKind(Enum):
    """Fixed error taxonomy: member value is (status, code)."""
    BAD_REQUEST = (400, "BAD_REQUEST")
    UNAUTHORIZED = (401, "UNAUTHORIZED")
    FORBIDDEN = (403, "FORBIDDEN")
    NOT_FOUND = (404, "NOT_FOUND")
    CONFLICT = (409, "CONFLICT")
    VALIDATION = (422, "VALIDATION_ERROR")
    INTERNAL = (500, "INTERNAL_SERVER_ERROR")
    SERVICE_UNAVAILABLE = (503, "SERVICE_UNAVAILABLE")

    @property
    def status(self) -> int:
        return self.value[0]

    @property
    def code(self) -> str:
        return self.value[1]

    @classmethod
    def from_status(cls, status: int) -> ErrorKind:
        """Map an HTTP status onto the closest kind.

        Statuses outside the table collapse to BAD_REQUEST below 500,
        including non-error statuses raised as HTTP exceptions, and to
        INTERNAL from 500 up.
        """
        for kind in cls:
            if kind.status == status:
                return kind
        if status < 500:
            return cls.BAD_REQUEST
        return cls.INTERNAL


@dataclass(eq=False)
class AppError(Exception):
    """Uniform application error.

    Raise it from throwing handlers or return it inside ``Err`` from
    Result-returning handlers. Build instances through the factories in
    ``core.errors.builders``.
    """
    kind: ErrorKind
    message: str
    timestamp: str = field(default_factory=utc_timestamp)

    def __post_init__(self):
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.kind.status

    @property
    def code(self) -> str:
        return self.kind.code

    def to_response(self) -> ErrorInfo:
        """Error payload for the envelope. The timestamp is not carried over."""
        return ErrorInfo(status=self.status, code=self.code, message=self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"AppError({self.code}, {self.message!r})"
