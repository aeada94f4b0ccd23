"""Tests for the posts routes."""

import pytest
from fastapi.testclient import TestClient


def _post(author_id: int = 1, slug: str = "hello-world", **extra) -> dict:
    return {
        "title": "Hello",
        "content": "First post",
        "slug": slug,
        "author_id": author_id,
        **extra,
    }


@pytest.fixture
def author(client: TestClient) -> dict:
    response = client.post("/api/users", json={"email": "author@example.com", "name": "Author"})
    return response.json()["data"]


class TestPostsWithoutDatabase:
    def test_list_is_unavailable(self, client_without_db: TestClient, expect_error) -> None:
        expect_error(client_without_db.get("/api/posts"), 503, "SERVICE_UNAVAILABLE")

    def test_create_is_unavailable(self, client_without_db: TestClient, expect_error) -> None:
        expect_error(client_without_db.post("/api/posts", json=_post()), 503, "SERVICE_UNAVAILABLE")

    @pytest.mark.parametrize("overrides", [
        {"slug": "Not A Slug"},
        {"title": ""},
        {"author_id": 0},
    ])
    def test_create_invalid_body(self, client_without_db: TestClient, expect_error, overrides: dict) -> None:
        payload = {**_post(), **overrides}
        expect_error(client_without_db.post("/api/posts", json=payload), 422, "VALIDATION_ERROR")


class TestPostsWithDatabase:
    def test_create(self, client: TestClient, author: dict, expect_success) -> None:
        response = client.post("/api/posts", json=_post(author["id"], published=True))
        assert response.status_code == 200
        post = expect_success(response.json())
        assert post["slug"] == "hello-world"
        assert post["published"] is True
        assert post["author_id"] == author["id"]

    def test_unknown_author(self, client: TestClient, expect_error) -> None:
        error = expect_error(client.post("/api/posts", json=_post(author_id=7)), 404, "NOT_FOUND")
        assert error["message"] == "Author not found"

    def test_duplicate_slug(self, client: TestClient, author: dict, expect_error) -> None:
        client.post("/api/posts", json=_post(author["id"]))
        expect_error(client.post("/api/posts", json=_post(author["id"])), 409, "CONFLICT")

    def test_list(self, client: TestClient, author: dict, expect_success, expect_paginated) -> None:
        for i in range(3):
            client.post("/api/posts", json=_post(author["id"], slug=f"post-{i}"))

        body = client.get("/api/posts", params={"limit": 2}).json()
        assert [post["slug"] for post in expect_success(body)] == ["post-0", "post-1"]
        pagination = expect_paginated(body)
        assert pagination["total_pages"] == 2
        assert pagination["has_more"] is True
