"""Tests for input validation helpers."""

from datetime import datetime

import pytest

from restaurant_wheel.errors import ValidationError
from restaurant_wheel.utils.validation import (
    is_valid_email,
    is_valid_rating,
    is_valid_restaurant_state,
    is_valid_url,
    optional_link,
    parse_bool,
    parse_datetime,
    sanitize_string,
)


class TestUrls:
    @pytest.mark.parametrize("url", ["https://example.com", "http://menu.example.com/a?b=c", "ftp://files.example"])
    def test_valid(self, url):
        assert is_valid_url(url)

    @pytest.mark.parametrize("url", ["", "example", "not a url", "//missing-scheme"])
    def test_invalid(self, url):
        assert not is_valid_url(url)

    def test_optional_link_blank_is_none(self):
        assert optional_link("   ", "menu") is None
        assert optional_link(None, "menu") is None

    def test_optional_link_message(self):
        with pytest.raises(ValidationError, match="Invalid photo link URL"):
            optional_link("nope", "photo")


class TestRatings:
    @pytest.mark.parametrize("rating", [1, 10, 0.5, 11, 7.25])
    def test_positive_numbers(self, rating):
        assert is_valid_rating(rating)

    @pytest.mark.parametrize("rating", [0, -3, None, "5", False, float("nan"), float("inf"), 10**400])
    def test_rejected(self, rating):
        assert not is_valid_rating(rating)


class TestEmails:
    @pytest.mark.parametrize("email", ["member@example.com", "first.last+tag@mail.example.org"])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["", "nope", "a@", "@example.com", "two@@example.com", "sp ace@example.com", None])
    def test_invalid(self, email):
        assert not is_valid_email(email)


class TestMisc:
    def test_states(self):
        for state in ("pending", "active", "upcoming", "visited"):
            assert is_valid_restaurant_state(state)
        assert not is_valid_restaurant_state("archived")

    def test_sanitize(self):
        assert sanitize_string("  hi ") == "hi"
        assert sanitize_string(None) == ""

    def test_parse_datetime_utc(self):
        assert parse_datetime("2025-01-02T03:04:05+02:00", "visited_at") == datetime(2025, 1, 2, 1, 4, 5)
        assert parse_datetime(None, "visited_at") is None

    def test_parse_bool(self):
        assert parse_bool("true") is True
        assert parse_bool("FALSE") is False
        assert parse_bool(1) is True
