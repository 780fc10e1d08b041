"""
tests/dates/test_dates.py

Covers:
  - moment-style pattern translation (tokens, literals, escapes)
  - Parsing and rendering day strings
  - Normalization of date-like values to days
  - Sunday-based weekday index, including pre-epoch days
  - Inclusive day ranges
"""

from datetime import date, datetime

import numpy as np
import pytest

from workdays import CalendarError
from workdays._dates import (
    day_range,
    format_day,
    parse_day,
    to_day,
    to_days,
    translate_pattern,
    weekday_index,
)


# ── Pattern translation ───────────────────────────────────────────────────────

class TestTranslatePattern:

    @pytest.mark.parametrize("pattern, expected", [
        ("YYYY-MM-DD", "%Y-%m-%d"),
        ("DD-MM-YYYY", "%d-%m-%Y"),
        ("DD.MM.YY", "%d.%m.%y"),
        ("D/M/YYYY", "%d/%m/%Y"),
        ("dddd, MMMM D YYYY", "%A, %B %d %Y"),
        ("ddd DD MMM YYYY", "%a %d %b %Y"),
        ("YYYY-MM-DD HH:mm:ss", "%Y-%m-%d %H:%M:%S"),
    ])
    def test_tokens(self, pattern, expected):
        assert translate_pattern(pattern) == expected

    def test_bracketed_text_is_literal(self):
        assert translate_pattern("[Day] D [of] MMMM") == "Day %d of %B"

    def test_percent_is_escaped(self):
        assert translate_pattern("YYYY%MM") == "%Y%%%m"
        assert translate_pattern("[100%] YYYY") == "100%% %Y"

    @pytest.mark.parametrize("pattern", ["", None, 42])
    def test_invalid_pattern(self, pattern):
        with pytest.raises(CalendarError):
            translate_pattern(pattern)


# ── Parsing / rendering ───────────────────────────────────────────────────────

class TestParseFormat:

    def test_parse(self):
        assert parse_day("29-11-2019", "DD-MM-YYYY") == np.datetime64("2019-11-29")

    def test_parse_single_digits(self):
        assert parse_day("1-2-2019", "D-M-YYYY") == np.datetime64("2019-02-01")

    def test_parse_strips_whitespace(self):
        assert parse_day(" 2019-12-02 ", "YYYY-MM-DD") == np.datetime64("2019-12-02")

    def test_parse_drops_time(self):
        day = parse_day("2019-12-02 23:59:00", "YYYY-MM-DD HH:mm:ss")
        assert day == np.datetime64("2019-12-02")

    @pytest.mark.parametrize("text", ["2019-12-02", "31-02-2019", "", "soon"])
    def test_parse_failure(self, text):
        with pytest.raises(CalendarError):
            parse_day(text, "DD-MM-YYYY")

    def test_format(self):
        day = np.datetime64("2019-12-06")
        assert format_day(day, "DD-MM-YYYY") == "06-12-2019"
        assert format_day(day, "YYYY-MM-DD") == "2019-12-06"
        assert format_day(day, "[week of] DD.MM") == "week of 06.12"

    def test_format_beyond_year_9999(self):
        with pytest.raises(CalendarError):
            format_day(np.datetime64("10000-01-01"), "YYYY-MM-DD")

    def test_format_month_names(self):
        assert format_day(np.datetime64("2019-12-06"), "ddd D MMM YYYY") == "Fri 06 Dec 2019"


# ── Normalization ─────────────────────────────────────────────────────────────

class TestToDay:

    def test_date(self):
        assert to_day(date(2019, 12, 2), "YYYY-MM-DD") == np.datetime64("2019-12-02")

    def test_datetime(self):
        assert to_day(datetime(2019, 12, 2, 18, 30), "YYYY-MM-DD") == np.datetime64("2019-12-02")

    def test_numpy(self):
        day = to_day(np.datetime64("2019-12-02T18:30"), "YYYY-MM-DD")
        assert day == np.datetime64("2019-12-02")
        assert day.dtype == np.dtype("datetime64[D]")

    def test_nat(self):
        with pytest.raises(CalendarError):
            to_day(np.datetime64("NaT"), "YYYY-MM-DD")

    @pytest.mark.parametrize("value", [None, 20191202, 3.5, ["2019-12-02"]])
    def test_unsupported(self, value):
        with pytest.raises(CalendarError):
            to_day(value, "YYYY-MM-DD")

    def test_to_days(self):
        days = to_days(["02-12-2019", date(2019, 12, 3)], "DD-MM-YYYY")
        np.testing.assert_array_equal(
            days, np.array(["2019-12-02", "2019-12-03"], dtype="datetime64[D]")
        )

    def test_to_days_empty(self):
        days = to_days([], "YYYY-MM-DD")
        assert days.size == 0
        assert days.dtype == np.dtype("datetime64[D]")


# ── Weekday / ranges ──────────────────────────────────────────────────────────

class TestWeekdayIndex:

    @pytest.mark.parametrize("iso, expected", [
        ("2019-12-01", 0),   # Sunday
        ("2019-12-02", 1),
        ("2019-12-06", 5),
        ("2019-12-07", 6),   # Saturday
        ("1970-01-01", 4),   # Thursday
        ("1969-12-28", 0),   # Sunday before the epoch
        ("1900-01-01", 1),   # Monday
    ])
    def test_scalar(self, iso, expected):
        assert int(weekday_index(np.datetime64(iso))) == expected

    def test_matches_python_weekday(self):
        days = np.arange("2019-01-01", "2020-01-01", dtype="datetime64[D]")
        expected = [(d.item().weekday() + 1) % 7 for d in days]
        np.testing.assert_array_equal(weekday_index(days), expected)


class TestDayRange:

    def test_inclusive(self):
        days = day_range(np.datetime64("2019-12-02"), np.datetime64("2019-12-04"))
        np.testing.assert_array_equal(
            days, np.array(["2019-12-02", "2019-12-03", "2019-12-04"], dtype="datetime64[D]")
        )

    def test_single_day(self):
        assert day_range(np.datetime64("2019-12-02"), np.datetime64("2019-12-02")).size == 1

    def test_reversed_is_empty(self):
        assert day_range(np.datetime64("2019-12-04"), np.datetime64("2019-12-02")).size == 0
