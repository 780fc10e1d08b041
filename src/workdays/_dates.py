"""
Day-level date handling shared by the calendar.

Days are ``numpy.datetime64`` values with day resolution, so start-of-day
normalization, ordering and day arithmetic are plain NumPy operations.
Strings cross the boundary through moment-style token patterns
(``"DD-MM-YYYY"``) translated to ``strftime``/``strptime`` directives.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from functools import lru_cache
from typing import Iterable, Union

import numpy as np

from ._exceptions import CalendarError

DateLike = Union[str, date, datetime, np.datetime64]

DAY_UNIT = "datetime64[D]"
ONE_DAY = np.timedelta64(1, "D")

# 1970-01-01 was a Thursday; index 4 when Sunday is 0.
_EPOCH_WEEKDAY = 4

_TOKENS = {
    "YYYY": "%Y",
    "YY": "%y",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "M": "%m",
    "DD": "%d",
    "D": "%d",
    "dddd": "%A",
    "ddd": "%a",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
}

_TOKEN_RE = re.compile(r"\[([^\]]*)\]|YYYY|YY|MMMM|MMM|MM|M|DD|D|dddd|ddd|HH|mm|ss|%")


@lru_cache(maxsize=64)
def translate_pattern(pattern: str) -> str:
    """Translate a moment-style pattern into a ``strftime`` format string.

    ``"DD-MM-YYYY"`` becomes ``"%d-%m-%Y"``.  Text inside square brackets is
    copied literally, as are characters that are not tokens.
    """
    if not isinstance(pattern, str) or not pattern:
        raise CalendarError(f"Date pattern must be a non-empty string; got {pattern!r}.")

    def _sub(match: re.Match) -> str:
        literal = match.group(1)
        if literal is not None:
            return literal.replace("%", "%%")
        token = match.group(0)
        if token == "%":
            return "%%"
        return _TOKENS[token]

    return _TOKEN_RE.sub(_sub, pattern)


def parse_day(text: str, pattern: str) -> np.datetime64:
    fmt = translate_pattern(pattern)
    try:
        parsed = datetime.strptime(text.strip(), fmt)
    except ValueError as exc:
        raise CalendarError(
            f"Cannot parse {text!r} with pattern {pattern!r}."
        ) from exc
    return np.datetime64(parsed.date(), "D")


def to_day(value: DateLike, pattern: str) -> np.datetime64:
    """Normalize a date-like value to a day, dropping any time of day."""
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            raise CalendarError("Date value is NaT.")
        return value.astype(DAY_UNIT)
    if isinstance(value, datetime):
        return np.datetime64(value.date(), "D")
    if isinstance(value, date):
        return np.datetime64(value, "D")
    if isinstance(value, str):
        return parse_day(value, pattern)
    raise CalendarError(f"Unsupported date value {value!r}.")


def to_days(values: Iterable[DateLike], pattern: str) -> np.ndarray:
    return np.array([to_day(v, pattern) for v in values], dtype=DAY_UNIT)


def format_day(day: np.datetime64, pattern: str) -> str:
    as_date = np.datetime64(day, "D").item()
    # Days outside datetime.date's range (years 1..9999) come back as ints.
    if not isinstance(as_date, date):
        raise CalendarError(f"Cannot render {day!r}: outside the supported year range.")
    return as_date.strftime(translate_pattern(pattern))


def weekday_index(days):
    """Weekday of day(s) with Sunday = 0 through Saturday = 6."""
    return (np.asarray(days, dtype=DAY_UNIT).astype(np.int64) + _EPOCH_WEEKDAY) % 7


def day_range(start: np.datetime64, end: np.datetime64) -> np.ndarray:
    """Every day from ``start`` to ``end`` inclusive; empty when start > end."""
    return np.arange(start, end + ONE_DAY, dtype=DAY_UNIT)
