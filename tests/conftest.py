"""Shared pytest fixtures and envelope assertions for the starter API tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
import structlog
from fastapi.testclient import TestClient

from core.config import Settings
from main import create_app


def _is_iso_timestamp(value: Any) -> bool:
    if not isinstance(value, str) or not value.endswith("Z"):
        return False
    datetime.fromisoformat(value.replace("Z", "+00:00"))
    return True


@pytest.fixture(autouse=True, scope="session")
def _uncached_structlog_loggers() -> Iterator[None]:
    """Keep ``structlog.testing.capture_logs`` working after an app configures logging.

    Cached loggers bypass the processors that ``capture_logs`` swaps in, so the
    tests turn caching off whenever ``configure_logging`` runs.
    """
    original = structlog.configure

    def configure(**kwargs: Any) -> None:
        kwargs["cache_logger_on_first_use"] = False
        original(**kwargs)

    patcher = pytest.MonkeyPatch()
    patcher.setattr(structlog, "configure", configure)
    yield
    patcher.undo()


@pytest.fixture
def db_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(db_settings: Settings) -> Iterator[TestClient]:
    """Client for an app with a fresh database (tables created on startup)."""
    with TestClient(create_app(db_settings)) as test_client:
        yield test_client


@pytest.fixture
def client_without_db() -> Iterator[TestClient]:
    """Client for an app started without DATABASE_URL."""
    settings = Settings(DATABASE_URL=None, LOG_LEVEL="WARNING")
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def expect_success() -> Callable[[dict], Any]:
    """Assert a success envelope and return its data."""

    def check(body: dict) -> Any:
        assert body["success"] is True
        assert _is_iso_timestamp(body["timestamp"])
        assert "data" in body
        assert "error" not in body
        return body["data"]

    return check


@pytest.fixture
def expect_paginated(expect_success: Callable[[dict], Any]) -> Callable[[dict], dict]:
    """Assert a paginated envelope and return its pagination block."""

    def check(body: dict) -> dict:
        expect_success(body)
        pagination = body["pagination"]
        assert set(pagination) == {
            "total_items", "total_pages", "current_page", "page_size", "has_more",
        }
        assert isinstance(pagination["has_more"], bool)
        return pagination

    return check


@pytest.fixture
def expect_error() -> Callable[..., dict]:
    """Assert an error envelope with the given status and code; return the error."""

    def check(response, status: int, code: str) -> dict:
        assert response.status_code == status
        body = response.json()
        assert body["success"] is False
        assert _is_iso_timestamp(body["timestamp"])
        assert "data" not in body
        error = body["error"]
        assert error["status"] == status
        assert error["code"] == code
        assert isinstance(error["message"], str) and error["message"]
        return error

    return check
