"""Tests for shared route parameters."""

import pytest

from api.deps import parse_id


class TestParseId:
    @pytest.mark.parametrize(("raw", "expected"), [("1", 1), ("42", 42), ("007", 7)])
    def test_valid(self, raw: str, expected: int) -> None:
        assert parse_id(raw, "user").unwrap() == expected

    @pytest.mark.parametrize("raw", [
        "", "0", "-1", "+1", "1.5", "abc", "1_000", " 1", "1 ", "1e3", "١٢",
    ])
    def test_invalid(self, raw: str) -> None:
        error = parse_id(raw, "user").unwrap_err()
        assert error.code == "BAD_REQUEST"
        assert error.message == "Invalid user ID"
