"""Tests for finish date validation and normalization."""

from datetime import UTC, date, datetime

import pytest
from freezegun import freeze_time

from vanity.readings.dates import (
    check_date_input,
    finished_to_iso,
    format_iso_timestamp,
    normalize_finished,
    today_iso_date,
    validate_date_input,
)
from vanity.readings.exceptions import FutureDateError, InvalidDateError

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class TestValidateDateInput:
    def test_valid(self):
        assert validate_date_input("2024-01-15", now=NOW) == "2024-01-15T00:00:00.000Z"

    def test_surrounding_whitespace(self):
        assert validate_date_input("  2024-01-15 ", now=NOW) == "2024-01-15T00:00:00.000Z"

    def test_today_is_allowed(self):
        assert validate_date_input("2024-06-01", now=NOW) == "2024-06-01T00:00:00.000Z"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_required(self, value):
        with pytest.raises(InvalidDateError, match="Date is required"):
            validate_date_input(value, now=NOW)

    @pytest.mark.parametrize("value", ["01/15/2024", "15-01-2024", "2024-1-5", "yesterday", "2024-02-30"])
    def test_invalid(self, value):
        with pytest.raises(InvalidDateError, match="YYYY-MM-DD"):
            validate_date_input(value, now=NOW)

    def test_future(self):
        with pytest.raises(FutureDateError, match="future"):
            validate_date_input("2024-06-02", now=NOW)

    @freeze_time("2025-01-01")
    def test_default_clock(self):
        assert validate_date_input("2025-01-01") == "2025-01-01T00:00:00.000Z"
        with pytest.raises(FutureDateError):
            validate_date_input("2025-01-02")


@freeze_time("2025-01-01")
def test_check_date_input_messages():
    assert check_date_input("2024-12-31") is None
    assert check_date_input("") is None
    assert check_date_input("nope") == "Please enter a valid date (YYYY-MM-DD)"
    assert check_date_input("2030-01-01") == "Date cannot be in the future"


@freeze_time("2025-03-04 23:30:00")
def test_today_iso_date():
    assert today_iso_date() == "2025-03-04"


def test_format_iso_timestamp_millis():
    stamp = datetime(2024, 1, 15, 8, 30, 5, 123456, tzinfo=UTC)
    assert format_iso_timestamp(stamp) == "2024-01-15T08:30:05.123Z"


class TestNormalizeFinished:
    def test_null_and_empty(self):
        assert normalize_finished(None) is None
        assert normalize_finished("") is None

    def test_iso_string(self):
        assert normalize_finished("2023-01-15T00:00:00.000Z") == datetime(2023, 1, 15, tzinfo=UTC)

    def test_date_value(self):
        assert normalize_finished(date(2023, 1, 15)) == datetime(2023, 1, 15, tzinfo=UTC)

    def test_naive_datetime_is_utc(self):
        assert normalize_finished(datetime(2023, 1, 15, 10)) == datetime(2023, 1, 15, 10, tzinfo=UTC)

    def test_garbage(self):
        with pytest.raises(InvalidDateError):
            normalize_finished("sometime last spring")

    def test_finished_to_iso(self):
        assert finished_to_iso(date(2023, 1, 15)) == "2023-01-15T00:00:00.000Z"
        assert finished_to_iso(None) is None
