"""Unit tests for the primitive field checks."""

from datetime import date, datetime

import pytest

from form_builder.validation.checks import (
    Check,
    coerce_date,
    coerce_number,
    date_check,
    email_check,
    equals_check,
    format_number,
    is_empty,
    max_length_check,
    min_length_check,
    number_check,
    options_check,
    phone_check,
    required_check,
    url_check,
)


async def run(check: Check, value, values=None):
    return await check.run(value, values or {})


class TestHelpers:
    """Tests for emptiness and coercion helpers."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_empty_values(self, value):
        assert is_empty(value)

    @pytest.mark.parametrize("value", ["a", 0, False, [1]])
    def test_non_empty_values(self, value):
        assert not is_empty(value)

    def test_format_number(self):
        assert format_number(5.0) == "5"
        assert format_number(2.5) == "2.5"
        assert format_number(7) == "7"

    def test_coerce_number(self):
        assert coerce_number("4") == 4.0
        assert coerce_number(" -1.5e2 ") == -150.0
        assert coerce_number("abc") is None
        assert coerce_number(True) is None
        assert coerce_number("nan") is None
        assert coerce_number(float("inf")) is None

    def test_coerce_date(self):
        assert coerce_date("2024-02-29") == date(2024, 2, 29)
        assert coerce_date("2024-02-30") is None
        assert coerce_date("02/03/2024") is None
        assert coerce_date(datetime(2024, 1, 1, 12, 0)) == date(2024, 1, 1)


class TestStringChecks:
    """Tests for required, length and format checks."""

    @pytest.mark.asyncio
    async def test_required(self):
        check = required_check("Username is required")
        assert not check.skip_empty
        assert await run(check, "") == "Username is required"
        assert await run(check, "  ") == "Username is required"
        assert await run(check, "bob") is None

    @pytest.mark.asyncio
    async def test_length_bounds(self):
        assert await run(min_length_check(2), "a") == "Minimum 2 characters required"
        assert await run(min_length_check(2), "ab") is None
        assert await run(max_length_check(3), "abcd") == "Maximum 3 characters allowed"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["a@b.co", "first.last+tag@example.org"])
    async def test_valid_emails(self, value):
        assert await run(email_check(), value) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["a@b", "not-an-email", "@example.com"])
    async def test_invalid_emails(self, value):
        assert await run(email_check(), value) == "Invalid email format"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["5551234567", "+(555) 123-4567", "555-123-456789"])
    async def test_valid_phones(self, value):
        assert await run(phone_check(), value) is None

    @pytest.mark.asyncio
    async def test_invalid_phone(self):
        assert await run(phone_check(), "12345") == "Invalid phone number"

    @pytest.mark.asyncio
    async def test_url(self):
        assert await run(url_check(), "https://example.com/path") is None
        assert await run(url_check(), "example") == "Invalid URL"
        assert await run(url_check(), "ftp://example.com") == "Invalid URL"


class TestNumberCheck:
    """Tests for numeric parsing and bounds."""

    @pytest.mark.asyncio
    async def test_min_bound(self):
        check = number_check(minimum=5)
        assert await run(check, "4") == "Minimum value is 5"
        assert await run(check, 5) is None

    @pytest.mark.asyncio
    async def test_max_bound(self):
        assert await run(number_check(maximum=10.5), 11) == "Maximum value is 10.5"

    @pytest.mark.asyncio
    async def test_non_numeric(self):
        assert await run(number_check(), "four") == "Must be a number"


class TestDateCheck:
    """Tests for date parsing and bounds."""

    @pytest.mark.asyncio
    async def test_invalid_date(self):
        assert await run(date_check(), "yesterday") == "Please enter a valid date"

    @pytest.mark.asyncio
    async def test_min_date_is_inclusive(self):
        check = date_check(min_date=date(2000, 1, 1))
        assert await run(check, "2000-01-01") is None
        assert await run(check, "1999-12-31") == "Date must be after 2000-01-01"

    @pytest.mark.asyncio
    async def test_max_date(self):
        check = date_check(max_date=date(2020, 6, 1))
        assert await run(check, "2020-06-02") == "Date must be before 2020-06-01"

    @pytest.mark.asyncio
    async def test_today_is_resolved_at_validation_time(self):
        clock = {"today": date(2026, 1, 1)}
        check = date_check(max_date_today=True, today=lambda: clock["today"])

        assert await run(check, "2026-01-02") == "Date must be before 2026-01-01"
        clock["today"] = date(2026, 1, 5)
        assert await run(check, "2026-01-02") is None


class TestOtherChecks:
    """Tests for options, equality and async checks."""

    @pytest.mark.asyncio
    async def test_options(self):
        check = options_check(["Male", "Female", "Other"])
        assert await run(check, "Other") is None
        assert await run(check, "Unknown") == "Please select a valid option"

    @pytest.mark.asyncio
    async def test_equals(self):
        check = equals_check("password", "Passwords must match")
        assert await run(check, "secret", {"password": "secret"}) is None
        assert await run(check, "secrex", {"password": "secret"}) == "Passwords must match"

    @pytest.mark.asyncio
    async def test_async_check_is_awaited(self):
        async def taken(value, values):
            return "Username is taken" if value == "admin" else None

        check = Check("unique", taken)
        assert await run(check, "admin") == "Username is taken"
        assert await run(check, "bob") is None
