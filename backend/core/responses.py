"""API Response Envelope

Every endpoint answers with one of three shapes:

    Success:    {"success": true,  "timestamp": ..., "data": ...}
    Paginated:  {"success": true,  "timestamp": ..., "data": ..., "pagination": {...}}
    Error:      {"success": false, "timestamp": ..., "error": {"status", "code", "message"}}

The envelope timestamp is the moment the envelope is built, not the moment
the error was created.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def utc_timestamp() -> str:
    """Current instant as ISO-8601 UTC with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ErrorInfo(BaseModel):
    """Error payload inside the error envelope."""
    status: int
    code: str
    message: str


class PaginationInfo(BaseModel):
    """Pagination metadata for list responses."""
    total_items: int
    total_pages: int
    current_page: int
    page_size: int
    has_more: bool


class SuccessResponse(BaseModel, Generic[T]):
    success: Literal[True] = True
    timestamp: str = Field(default_factory=utc_timestamp)
    data: T


class PaginatedSuccessResponse(BaseModel, Generic[T]):
    success: Literal[True] = True
    timestamp: str = Field(default_factory=utc_timestamp)
    data: T
    pagination: PaginationInfo


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    timestamp: str = Field(default_factory=utc_timestamp)
    error: ErrorInfo


# What a paginated handler returns: (items, pagination)
PaginatedResult = tuple[T, PaginationInfo]


def create_success_response(data: Any) -> SuccessResponse[Any]:
    return SuccessResponse[Any](data=data)


def create_paginated_success_response(
    data: Any, pagination: PaginationInfo
) -> PaginatedSuccessResponse[Any]:
    return PaginatedSuccessResponse[Any](data=data, pagination=pagination)


def create_error_response(error_info: ErrorInfo) -> ErrorResponse:
    return ErrorResponse(error=error_info)


def create_pagination_info(total_items: int, page: int, page_size: int) -> PaginationInfo:
    """Derive pagination metadata from a total count and the requested page."""
    total_pages = math.ceil(total_items / page_size) if page_size > 0 else 0
    return PaginationInfo(
        total_items=total_items,
        total_pages=total_pages,
        current_page=page,
        page_size=page_size,
        has_more=page < total_pages,
    )


def get_pagination_info(*, page: int, page_size: int, total_items: int) -> PaginationInfo:
    """Keyword form of create_pagination_info."""
    return create_pagination_info(total_items, page, page_size)
