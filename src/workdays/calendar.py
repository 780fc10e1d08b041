from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar, Union

import numpy as np

from ._dates import (
    DAY_UNIT,
    ONE_DAY,
    DateLike,
    day_range,
    format_day,
    to_day,
    to_days,
    weekday_index,
)
from ._exceptions import CalendarError
from .config import CalendarConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

_WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


class Calendar:
    """
    Working-day calendar: week-off weekdays plus explicit holiday and
    working-day overrides.

    Classification precedence is custom working day, then week-off day, then
    custom holiday.  Counting and shifting fail soft: a fault yields 0 or
    today's date unless the configuration sets ``strict``.
    """

    def __init__(
        self,
        config: Union[CalendarConfig, Mapping[str, Any], None] = None,
        clock: Optional[Callable[[], DateLike]] = None,
        **options: Any,
    ) -> None:
        if config is None:
            try:
                config = CalendarConfig(**options)
            except TypeError as exc:
                raise CalendarError(str(exc)) from exc
        else:
            if not isinstance(config, CalendarConfig):
                config = CalendarConfig.from_mapping(config)
            if options:
                config = config.replace(**options)

        self._clock: Callable[[], DateLike] = clock or date.today
        self._apply(config)

    @classmethod
    def from_config(
        cls,
        config: Union[CalendarConfig, Mapping[str, Any]],
        clock: Optional[Callable[[], DateLike]] = None,
    ) -> "Calendar":
        return cls(config, clock=clock)

    # ── configuration ────────────────────────────────────────────────────

    def _apply(self, config: CalendarConfig) -> None:
        pattern = config.date_pattern
        holidays = self._compile_dates(config.custom_holidays, pattern, "holiday")
        working = self._compile_dates(config.custom_working_days, pattern, "working day")

        self._config = config
        self._week_off: np.ndarray = np.array(sorted(config.week_off_days), dtype=np.int64)
        self._holidays: np.ndarray = holidays
        self._working: np.ndarray = working

    @staticmethod
    def _compile_dates(values: Iterable[DateLike], pattern: str, kind: str) -> np.ndarray:
        days = []
        for value in values:
            try:
                days.append(to_day(value, pattern))
            except CalendarError:
                # Unparseable entries never match any date.
                logger.warning("Ignoring unparseable custom %s %r", kind, value)
        return np.unique(np.array(days, dtype=DAY_UNIT))

    def _reconfigure(self, **changes: Any) -> "Calendar":
        self._apply(self._config.replace(**changes))
        return self

    def set_week_off_days(self, week_off_days: Iterable[int]) -> "Calendar":
        """Replace the week-off weekdays (0 = Sunday) and return ``self``."""
        return self._reconfigure(week_off_days=week_off_days)

    def set_custom_holidays(self, custom_holidays: Iterable[DateLike]) -> "Calendar":
        return self._reconfigure(custom_holidays=custom_holidays)

    def set_custom_working_days(self, custom_working_days: Iterable[DateLike]) -> "Calendar":
        return self._reconfigure(custom_working_days=custom_working_days)

    def replace(self, **changes: Any) -> "Calendar":
        """Return a new calendar with config fields replaced; ``self`` is untouched."""
        return Calendar(self._config.replace(**changes), clock=self._clock)

    # ── classification ───────────────────────────────────────────────────

    def _classify(self, day: np.datetime64) -> tuple[bool, str]:
        if day in self._working:
            return True, "a Custom Working Day"
        weekday = int(weekday_index(day))
        if weekday in self._config.week_off_days:
            return False, f"a {_WEEKDAY_NAMES[weekday]}"
        if day in self._holidays:
            return False, "a Custom Holiday"
        return True, "a working day"

    def is_working_day(self, value: DateLike) -> bool:
        try:
            day = to_day(value, self._config.date_pattern)
        except CalendarError:
            self._log("%r is not a recognizable date; treating it as a working day", value)
            return True

        working, reason = self._classify(day)
        if self._config.verbose:
            self._log("%s is %s", self._render(day), reason)
        return working

    def working_day_mask(self, days: Iterable[DateLike]) -> np.ndarray:
        """Vectorized :meth:`is_working_day` over an array of days.

        Unlike the scalar form, an unparseable entry raises ``CalendarError``.
        """
        if isinstance(days, np.ndarray) and days.dtype.kind == "M":
            arr = days.astype(DAY_UNIT)
        else:
            arr = to_days(days, self._config.date_pattern)

        mask = ~np.isin(weekday_index(arr), self._week_off) & ~np.isin(arr, self._holidays)
        return mask | np.isin(arr, self._working)

    # ── counting ─────────────────────────────────────────────────────────

    def _count(self, dates: Iterable[DateLike]) -> int:
        try:
            items = list(dates)
        except TypeError as exc:
            raise CalendarError(f"Expected a sequence of dates; got {dates!r}.") from exc

        if len(items) % 2:
            policy = self._config.odd_length
            if policy == "today":
                items.append(self._today())
            elif policy == "drop":
                items.pop()
            else:
                raise CalendarError(f"Expected an even number of dates; got {len(items)}.")

        bounds = to_days(items, self._config.date_pattern)

        total = 0
        previous_end: Optional[np.datetime64] = None
        for start, end in zip(bounds[0::2], bounds[1::2]):
            if previous_end is not None and start <= previous_end:
                start = previous_end + ONE_DAY

            if start == end:
                if previous_end is None or previous_end < start:
                    total += int(self._classify(start)[0])
            elif start < end:
                total += int(np.count_nonzero(self.working_day_mask(day_range(start, end))))

            previous_end = end

        if not self._config.include_today and total > 0:
            total -= 1

        self._log("Working Days: %d day(s)", total)
        return total

    def count_working_days(self, dates: Iterable[DateLike]) -> int:
        """
        Count working days over a start/stop sequence of dates.

        Dates are taken in (start, end) pairs, like a start/stop timer log.  A
        pair starting on or before the previous pair's end is clamped to the
        day after it, so shared days are counted once.  An odd-length
        sequence is closed with today by default.

        Example (week-off Sat/Sun, pattern ``DD-MM-YYYY``)::

            cal.count_working_days(["29-11-2019", "03-12-2019",
                                    "07-12-2019", "12-12-2019"])

        gives 7 with the defaults (Fri, Mon, Tue + Mon..Thu).  It gives 6
        with ``include_today=False``, or with ``custom_holidays=["02-12-2019"]``
        and today counted.
        """
        return self._settle("count_working_days", lambda: self._count(dates), lambda: 0)

    # ── shifting ─────────────────────────────────────────────────────────

    def _shift(self, value: DateLike, n: int, step: int) -> str:
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise CalendarError(f"Number of working days must be an integer; got {n!r}.")
        if n < 0:
            raise CalendarError(f"Number of working days must be non-negative; got {n}.")

        pattern = self._config.date_pattern
        day = to_day(value, pattern)

        if self._week_off.size == 7:
            day = self._nth_custom_working_day(day, int(n), step)
        else:
            remaining = int(n)
            delta = ONE_DAY * step
            while remaining > 0:
                day = day + delta
                if self._classify(day)[0]:
                    remaining -= 1

        return format_day(day, pattern)

    def _nth_custom_working_day(self, day: np.datetime64, n: int, step: int) -> np.datetime64:
        # Every weekday is off: only custom working days can be reached.
        if n == 0:
            return day
        if step > 0:
            candidates = self._working[self._working > day]
        else:
            candidates = self._working[self._working < day][::-1]
        if candidates.size < n:
            raise CalendarError(
                f"All weekdays are off and only {candidates.size} custom working "
                f"day(s) lie in that direction; {n} requested."
            )
        return candidates[n - 1]

    def add_working_days(self, value: DateLike, n: int = 1) -> str:
        """
        Step forward ``n`` working days from ``value``.

        ``add_working_days("06-12-2019", 2)`` on a Friday returns
        ``"10-12-2019"`` (Tuesday).
        """
        return self._settle("add_working_days", lambda: self._shift(value, n, 1), self._today_text)

    def subtract_working_days(self, value: DateLike, n: int = 1) -> str:
        return self._settle(
            "subtract_working_days", lambda: self._shift(value, n, -1), self._today_text
        )

    def next_working_day(self, value: DateLike) -> str:
        return self.add_working_days(value, 1)

    def prev_working_day(self, value: DateLike) -> str:
        return self.subtract_working_days(value, 1)

    # ── fault handling ───────────────────────────────────────────────────

    def _settle(self, operation: str, compute: Callable[[], T], fallback: Callable[[], T]) -> T:
        try:
            return compute()
        except CalendarError as exc:
            if self._config.strict:
                raise
            if self._config.verbose:
                logger.warning("%s failed, returning fallback: %s", operation, exc)
            return fallback()

    def _today(self) -> np.datetime64:
        return to_day(self._clock(), self._config.date_pattern)

    def _today_text(self) -> str:
        return format_day(self._today(), self._config.date_pattern)

    def _render(self, day: np.datetime64) -> str:
        try:
            return format_day(day, self._config.date_pattern)
        except CalendarError:
            return str(day)

    def _log(self, msg: str, *args: Any) -> None:
        if self._config.verbose:
            logger.info(msg, *args)

    # ── properties / repr ────────────────────────────────────────────────

    @property
    def config(self) -> CalendarConfig:
        return self._config

    @property
    def week_off_days(self) -> frozenset[int]:
        return self._config.week_off_days

    @property
    def custom_holidays(self) -> tuple:
        return self._config.custom_holidays

    @property
    def custom_working_days(self) -> tuple:
        return self._config.custom_working_days

    @property
    def date_pattern(self) -> str:
        return self._config.date_pattern

    @property
    def include_today(self) -> bool:
        return self._config.include_today

    @property
    def verbose(self) -> bool:
        return self._config.verbose

    def __repr__(self) -> str:
        return (
            f"Calendar(week_off_days={sorted(self._config.week_off_days)}, "
            f"holidays={self._holidays.size}, "
            f"working_days={self._working.size}, "
            f"date_pattern={self._config.date_pattern!r}, "
            f"include_today={self._config.include_today})"
        )
