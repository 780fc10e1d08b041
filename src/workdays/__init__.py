"""
workdays
~~~~~~~~

Working-day arithmetic over calendar dates.  A Calendar classifies days as
working or not from a set of week-off weekdays, explicit holidays and explicit
working-day overrides, counts working days over start/stop date sequences and
shifts dates by a number of working days.

Basic usage::

    from workdays import Calendar

    cal = Calendar(date_pattern="DD-MM-YYYY", custom_holidays=["25-12-2019"])
    cal.is_working_day("25-12-2019")                        # → False
    cal.add_working_days("06-12-2019", 2)                   # → "10-12-2019"
    cal.count_working_days(["02-12-2019", "06-12-2019"])    # → 5

Mutators return the calendar itself, so reconfiguration chains::

    cal.set_week_off_days([0, 1, 2, 3, 4, 6]).count_working_days(
        ["05-12-2019", "12-12-2019"]
    )                                                       # Fridays → 1

Configuration can also come from YAML::

    from workdays import Calendar, load_config

    cal = Calendar(load_config("calendar.yaml"))

Public API
----------
Calendar        The main class.
CalendarConfig  Immutable calendar settings.
CalendarError   Exception for invalid configuration and unusable dates.
load_config     Read a CalendarConfig from a YAML file.
"""

from __future__ import annotations

from workdays._exceptions import CalendarError
from workdays.calendar import Calendar
from workdays.config import CalendarConfig, load_config

__all__ = [
    "Calendar",
    "CalendarConfig",
    "CalendarError",
    "load_config",
]
