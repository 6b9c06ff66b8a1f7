"""
Tests for date coercion and naive date display.
"""
from datetime import date, datetime, timezone

import pytest

from agency.status.dates import (
    format_naive_date,
    format_naive_date_short,
    format_naive_datetime,
    format_naive_time,
    is_in_past,
    to_date,
    to_naive_date,
)


@pytest.mark.unit
class TestToDate:

    def test_none_and_empty(self):
        assert to_date(None) is None
        assert to_date("") is None
        assert to_date("   ") is None

    def test_datetime_is_returned_unchanged(self):
        value = datetime(2024, 5, 1, 10, 30)
        assert to_date(value) is value

    def test_date_becomes_midnight(self):
        assert to_date(date(2024, 5, 1)) == datetime(2024, 5, 1)

    def test_iso_strings(self):
        assert to_date("2024-05-01") == datetime(2024, 5, 1)
        assert to_date("2024-05-01T10:30:00") == datetime(2024, 5, 1, 10, 30)
        assert to_date("2024-05-01T10:30:00Z") == datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)

    def test_german_date_string(self):
        assert to_date("01.05.2024") == datetime(2024, 5, 1)

    def test_garbage_is_none(self):
        assert to_date("not-a-date") is None
        assert to_date("2024-13-45") is None

    def test_other_types_are_none(self):
        assert to_date(42) is None
        assert to_date(3.5) is None
        assert to_date(object()) is None
        assert to_date(["2024-05-01"]) is None


@pytest.mark.unit
class TestIsInPast:
    NOW = datetime(2024, 6, 1, 12, 0)

    def test_earlier_is_past(self):
        assert is_in_past(datetime(2024, 5, 31), now=self.NOW)

    def test_same_instant_is_not_past(self):
        assert not is_in_past(self.NOW, now=self.NOW)

    def test_future_is_not_past(self):
        assert not is_in_past("2024-06-02", now=self.NOW)

    def test_missing_is_not_past(self):
        assert not is_in_past(None, now=self.NOW)
        assert not is_in_past("kaputt", now=self.NOW)

    def test_aware_and_naive_are_comparable(self):
        assert is_in_past("2024-06-01T11:00:00Z", now=self.NOW)
        assert not is_in_past("2024-06-01T13:00:00+00:00", now=self.NOW)


@pytest.mark.unit
class TestNaiveFormatting:

    def test_format_date_from_text(self):
        assert format_naive_date("2024-05-01T23:30:00.000Z") == "01.05.2024"

    def test_format_date_from_datetime(self):
        assert format_naive_date(datetime(2024, 12, 24, 8, 15)) == "24.12.2024"

    def test_format_date_fallback(self):
        assert format_naive_date(None) == "-"
        assert format_naive_date("", fallback="") == ""
        assert format_naive_date("24.12.2024") == "-"

    def test_format_date_short(self):
        assert format_naive_date_short("2024-05-01") == "01.05.24"
        assert format_naive_date_short(None) == ""

    def test_format_datetime_and_time(self):
        assert format_naive_datetime("2024-05-01T09:05:00") == "01.05.2024, 09:05"
        assert format_naive_time("2024-05-01T09:05:00") == "09:05"
        assert format_naive_time("2024-05-01") == "-"


@pytest.mark.unit
class TestToNaiveDate:

    def test_date_only_is_midnight(self):
        assert to_naive_date("2024-05-01") == datetime(2024, 5, 1)

    def test_local_time_is_kept(self):
        assert to_naive_date("2024-05-01T14:30") == datetime(2024, 5, 1, 14, 30)

    def test_offset_is_parsed_as_is(self):
        parsed = to_naive_date("2024-05-01T14:30:00+02:00")
        assert parsed.hour == 14
        assert parsed.utcoffset().total_seconds() == 7200

    def test_blank(self):
        assert to_naive_date(None) is None
        assert to_naive_date("  ") is None
