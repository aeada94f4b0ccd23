"""Database Module with Result-based Helpers

Async SQLAlchemy engine and session management. The database is optional:
without a DATABASE_URL no engine is created, ``get_db`` yields ``None`` and
routes answer SERVICE_UNAVAILABLE through ``require_session``.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from core.errors import (
    AppError,
    DatabaseErrorMapper,
    Err,
    Ok,
    Result,
    map_db_errors,
    not_found,
    service_unavailable,
)
from core.logging import db_logger
from core.responses import PaginationInfo, create_pagination_info

T = TypeVar("T")

log = db_logger()


Base = declarative_base()


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None

_db_mapper = DatabaseErrorMapper("database")


def configure_database(url: str | None, *, echo: bool = False) -> None:
    """(Re)create the engine and session factory for ``url``.

    An empty url leaves the app without a database.
    """
    global _engine, _session_factory

    if not url:
        log.warning("database_not_configured", message="DATABASE_URL is not set")
        _engine = None
        _session_factory = None
        return

    engine_kwargs: dict = {"echo": echo}
    if "sqlite" not in url:
        engine_kwargs.update({
            "pool_pre_ping": True,
            "pool_size": 5,
            "max_overflow": 10,
        })

    _engine = create_async_engine(url, **engine_kwargs)
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_engine() -> AsyncEngine | None:
    return _engine


async def init_models() -> None:
    """Create all tables. No-op without a database."""
    if _engine is None:
        return
    # Register model tables on Base.metadata
    import models  # noqa: F401

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("database_connected", message="Database tables initialized")


async def dispose_database() -> None:
    if _engine is not None:
        await _engine.dispose()
        log.debug("database_disposed", message="Database connections closed")


@asynccontextmanager
async def get_db_session() -> AsyncIterator[AsyncSession | None]:
    """Context manager for a session, None when no database is configured."""
    if _session_factory is None:
        yield None
        return
    async with _session_factory() as session:
        yield session


async def get_db() -> AsyncIterator[AsyncSession | None]:
    """Dependency that yields a session, or None when no database is configured."""
    async with get_db_session() as session:
        yield session


def require_session(session: AsyncSession | None) -> AsyncSession:
    """Session or SERVICE_UNAVAILABLE."""
    if session is None:
        raise service_unavailable("Database not available")
    return session


@map_db_errors("database.fetch_one")
async def fetch_one(
    session: AsyncSession,
    model: type[T],
    id: int,
    entity_name: str | None = None,
) -> Result[T, AppError]:
    """Fetch a single entity by primary key.

    Returns:
        Ok(entity) if found
        Err(not_found) if not found
        Err(mapped db error) on database failure
    """
    entity = await session.get(model, id)
    if entity is None:
        return Err(not_found(f"{entity_name or model.__name__} not found"))
    return Ok(entity)


@map_db_errors("database.fetch_page")
async def fetch_page(
    session: AsyncSession,
    model: type[T],
    page: int,
    page_size: int,
) -> Result[tuple[Sequence[T], PaginationInfo], AppError]:
    """Fetch one page of ``model`` ordered by id, plus pagination metadata."""
    total = await session.scalar(select(func.count()).select_from(model))
    rows = await session.scalars(
        select(model)
        .order_by(model.id)
        .limit(page_size)
        .offset((page - 1) * page_size)
    )
    return Ok((rows.all(), create_pagination_info(total or 0, page, page_size)))


async def create_entity(
    session: AsyncSession,
    entity: T,
) -> Result[T, AppError]:
    """Insert ``entity`` and commit.

    Returns:
        Ok(entity) with generated columns populated
        Err(AppError) on failure, after rolling back
    """
    try:
        session.add(entity)
        await session.commit()
        await session.refresh(entity)
        return Ok(entity)
    except Exception as e:
        await session.rollback()
        return Err(_db_mapper.map_exception(e))
