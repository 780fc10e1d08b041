"""Calendar configuration and YAML loading."""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping

import yaml

from ._dates import DateLike, translate_pattern
from ._exceptions import CalendarError

ODD_LENGTH_POLICIES = ("today", "drop", "raise")

# Option names of the construction interface, mapped to field names.
_ALIASES = {
    "includeToday": "include_today",
    "weekOffDays": "week_off_days",
    "datePattern": "date_pattern",
    "dateFormat": "date_pattern",
    "customHolidays": "custom_holidays",
    "customWorkingDays": "custom_working_days",
    "oddLength": "odd_length",
}


def _week_off(days: Iterable[int]) -> frozenset[int]:
    if isinstance(days, (str, bytes)):
        raise CalendarError(f"Week-off days must be a collection of integers; got {days!r}.")
    try:
        items = list(days)
    except TypeError as exc:
        raise CalendarError(f"Week-off days must be a collection of integers; got {days!r}.") from exc
    for d in items:
        if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6:
            raise CalendarError(f"Week-off day must be an integer in 0..6; got {d!r}.")
    return frozenset(items)


def _dates(values: Iterable[DateLike] | None, name: str) -> tuple:
    if values is None:
        return ()
    if isinstance(values, (str, bytes)):
        raise CalendarError(f"{name} must be a sequence of dates, not a single string.")
    try:
        return tuple(values)
    except TypeError as exc:
        raise CalendarError(f"{name} must be a sequence of dates; got {values!r}.") from exc


@dataclasses.dataclass(frozen=True)
class CalendarConfig:
    """Immutable calendar settings.

    Weekday indices run from 0 (Sunday) to 6 (Saturday).  Custom dates may be
    strings in ``date_pattern`` or date objects.
    """

    include_today: bool = True
    verbose: bool = False
    week_off_days: frozenset[int] = frozenset({0, 6})
    date_pattern: str = "YYYY-MM-DD"
    custom_holidays: tuple = ()
    custom_working_days: tuple = ()
    strict: bool = False
    odd_length: str = "today"

    def __post_init__(self) -> None:
        object.__setattr__(self, "week_off_days", _week_off(self.week_off_days))
        object.__setattr__(self, "custom_holidays", _dates(self.custom_holidays, "custom_holidays"))
        object.__setattr__(
            self, "custom_working_days", _dates(self.custom_working_days, "custom_working_days")
        )
        translate_pattern(self.date_pattern)
        if self.odd_length not in ODD_LENGTH_POLICIES:
            raise CalendarError(
                f"odd_length must be one of {ODD_LENGTH_POLICIES}; got {self.odd_length!r}."
            )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "CalendarConfig":
        """Build a config from snake_case field names or camelCase option names."""
        fields = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _ALIASES.get(key, key)
            if name not in fields:
                raise CalendarError(f"Unknown calendar option {key!r}.")
            kwargs[name] = value
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "CalendarConfig":
        try:
            return dataclasses.replace(self, **changes)
        except TypeError as exc:
            raise CalendarError(str(exc)) from exc


def load_config(config_path: str) -> CalendarConfig:
    """Load calendar configuration from a YAML file.

    Options are read from a top-level ``calendar`` mapping when present,
    otherwise from the document root.
    """
    with open(config_path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise CalendarError(f"Malformed calendar config {config_path}: {exc}") from exc

    if raw is None:
        return CalendarConfig()
    if not isinstance(raw, Mapping):
        raise CalendarError(f"Calendar config {config_path} must be a mapping.")

    section = raw.get("calendar", raw)
    if section is None:
        return CalendarConfig()
    if not isinstance(section, Mapping):
        raise CalendarError(f"'calendar' section of {config_path} must be a mapping.")
    return CalendarConfig.from_mapping(section)
