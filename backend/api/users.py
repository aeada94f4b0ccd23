"""Users API Routes

Each route uses a different adapter style:
- list: throwing, paginated
- get: Result-returning
- create: throwing
"""
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import PaginationParams, parse_id
from core.database import create_entity, fetch_one, fetch_page, get_db, require_session
from core.errors import AppError, Result, api_handler, paginated_api_handler, result_handler
from core.logging import api_logger
from models import User

log = api_logger()

router = APIRouter()


# === Request/Response Models ===

class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(min_length=2, max_length=100)
    avatar_url: HttpUrl | None = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    avatar_url: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# === Endpoints ===

@router.get("")
@paginated_api_handler
async def list_users(
    params: Annotated[PaginationParams, Query()],
    db: AsyncSession | None = Depends(get_db),
):
    """List users, one page at a time."""
    session = require_session(db)
    users, pagination = (await fetch_page(session, User, params.page, params.limit)).unwrap()
    return [UserRead.model_validate(user) for user in users], pagination


async def _load_user(db: AsyncSession | None, user_id: int) -> Result[UserRead, AppError]:
    session = require_session(db)
    found = await fetch_one(session, User, user_id, "User")
    return found.map(UserRead.model_validate)


@router.get("/{user_id}")
@result_handler
async def get_user(user_id: str, db: AsyncSession | None = Depends(get_db)):
    """Get a user by ID."""
    return await parse_id(user_id, "user").and_then_async(lambda uid: _load_user(db, uid))


@router.post("")
@api_handler
async def create_user(payload: UserCreate, db: AsyncSession | None = Depends(get_db)):
    """Create a user. Duplicate emails answer CONFLICT."""
    session = require_session(db)
    user = User(
        email=payload.email,
        name=payload.name,
        avatar_url=str(payload.avatar_url) if payload.avatar_url else None,
    )
    created = (await create_entity(session, user)).unwrap()
    log.info("user_created", user_id=created.id)
    return UserRead.model_validate(created)
