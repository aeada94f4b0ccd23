"""Shared request parameters for API routes."""
from pydantic import BaseModel, Field

from core.errors import AppError, Result, bad_request, ensure, err


class PaginationParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)


def parse_id(raw: str, entity: str) -> Result[int, AppError]:
    """Positive integer id from a path segment, BAD_REQUEST otherwise.

    Only plain ASCII digits are accepted: no sign, whitespace, underscores
    or non-ASCII numerals.
    """
    if not (raw.isascii() and raw.isdecimal()):
        return err(bad_request(f"Invalid {entity} ID"))
    value = int(raw)
    return ensure(value > 0, bad_request(f"Invalid {entity} ID")).map(lambda _: value)
