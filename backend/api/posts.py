"""Posts API Routes

Result-returning handlers end to end: lookups and inserts are chained with
``and_then_async`` instead of early raises.
"""
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import PaginationParams
from core.database import create_entity, fetch_one, fetch_page, get_db, require_session
from core.errors import paginated_result_handler, result_handler
from models import Post, User

router = APIRouter()


# === Request/Response Models ===

class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    slug: str = Field(min_length=1, max_length=200, pattern=r"^[a-z0-9-]+$")
    published: bool = False
    author_id: int = Field(gt=0)


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    slug: str
    published: bool
    author_id: int
    created_at: datetime
    updated_at: datetime


# === Endpoints ===

@router.get("")
@paginated_result_handler
async def list_posts(
    params: Annotated[PaginationParams, Query()],
    db: AsyncSession | None = Depends(get_db),
):
    """List posts, one page at a time."""
    session = require_session(db)
    page = await fetch_page(session, Post, params.page, params.limit)
    return page.map(
        lambda rows_and_info: (
            [PostRead.model_validate(post) for post in rows_and_info[0]],
            rows_and_info[1],
        )
    )


@router.post("")
@result_handler
async def create_post(payload: PostCreate, db: AsyncSession | None = Depends(get_db)):
    """Create a post for an existing author."""
    session = require_session(db)

    async def insert(_author: User):
        created = await create_entity(session, Post(**payload.model_dump()))
        return created.map(PostRead.model_validate)

    author = await fetch_one(session, User, payload.author_id, "Author")
    return await author.and_then_async(insert)
