"""
Public holiday calendars for the regions on-call staff work from.

Only a closed set of regions is supported. Easter-relative holidays use the
Gregorian computus for Berlin and a fixed table of Orthodox Easter dates for
Bulgaria; years outside that table are reported as a data gap rather than as
"no holiday".
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from pager_hours.errors import CalendarDataGapError, UnsupportedRegionError


class Region(str, Enum):
    BERLIN = "Berlin"
    BULGARIA = "Bulgaria"
    CALIFORNIA = "California"
    NEW_YORK = "New York"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Holiday:
    name: str


ORTHODOX_EASTER: Mapping[int, date] = MappingProxyType(
    {
        2013: date(2013, 5, 5),
        2014: date(2014, 4, 20),
        2015: date(2015, 4, 12),
        2016: date(2016, 5, 1),
        2017: date(2017, 4, 16),
        2018: date(2018, 4, 8),
        2019: date(2019, 4, 28),
        2020: date(2020, 4, 19),
        2021: date(2021, 5, 2),
        2022: date(2022, 4, 24),
        2023: date(2023, 4, 16),
        2024: date(2024, 5, 5),
        2025: date(2025, 4, 20),
        2026: date(2026, 4, 12),
        2027: date(2027, 5, 2),
        2028: date(2028, 4, 16),
        2029: date(2029, 4, 8),
        2030: date(2030, 4, 28),
    }
)

# (month, day) -> name
_BERLIN_FIXED = {
    (1, 1): "New Year's Day",
    (5, 1): "Labour Day",
    (10, 3): "German Unity Day",
    (12, 25): "Christmas Day",
    (12, 26): "St. Stephen's Day",
}
_BERLIN_EASTER = {
    0: "Easter",
    -2: "Good Friday",
    1: "Easter Monday",
    39: "Ascension Day",
    50: "Whit Monday",
}

_USA_FIXED = {
    (1, 1): "New Year's Day",
    (7, 4): "Independence Day",
    (12, 25): "Christmas Day",
}

_BULGARIA_FIXED = {
    (1, 1): "New Year's Day",
    (1, 2): "Day after New Year's Day",
    (3, 3): "Liberation Day",
    (5, 1): "Labour Day",
    (5, 6): "St. George's Day",
    (5, 24): "Bulgarian Education and Culture and Slavonic Literature Day",
    (9, 6): "Unification Day",
    (9, 22): "Independence Day",
    (11, 1): "Day of the Bulgarian Enlighteners",
    (12, 24): "Christmas Eve",
    (12, 25): "Christmas Day",
    (12, 26): "Second Day of Christmas",
}
_BULGARIA_EASTER = {
    0: "Easter",
    -2: "Good Friday",
    -1: "Easter Saturday",
    1: "Easter Monday",
}


def holiday(
    when: date | datetime,
    region: Region,
    orthodox_easter: Mapping[int, date] = ORTHODOX_EASTER,
) -> Optional[Holiday]:
    """
    Return the public holiday falling on ``when`` in ``region``, or None.

    ``when`` must already be expressed in the worker's local time; only its
    calendar day is looked at.

    Raises UnsupportedRegionError for regions without a calendar and
    CalendarDataGapError when Bulgaria is asked about a year missing from
    ``orthodox_easter``.
    """
    day = when.date() if isinstance(when, datetime) else when

    if region is Region.BERLIN:
        return _holiday_berlin(day)
    if region is Region.BULGARIA:
        return _holiday_bulgaria(day, orthodox_easter)
    if region is Region.CALIFORNIA or region is Region.NEW_YORK:
        return _holiday_usa(day)
    raise UnsupportedRegionError(f"Region not supported: {region!r}")


def _from_easter(
    day: date, reference: date, offsets: dict[int, str]
) -> Optional[Holiday]:
    name = offsets.get((day - reference).days)
    return Holiday(name) if name else None


def _fixed(day: date, table: dict[tuple[int, int], str]) -> Optional[Holiday]:
    name = table.get((day.month, day.day))
    return Holiday(name) if name else None


def _holiday_berlin(day: date) -> Optional[Holiday]:
    return _fixed(day, _BERLIN_FIXED) or _from_easter(
        day, easter(day.year), _BERLIN_EASTER
    )


def _holiday_bulgaria(day: date, table: Mapping[int, date]) -> Optional[Holiday]:
    reference = table.get(day.year)
    if reference is None:
        raise CalendarDataGapError(f"Don't know orthodox easter for year {day.year}")
    return _from_easter(day, reference, _BULGARIA_EASTER) or _fixed(
        day, _BULGARIA_FIXED
    )


_USA_RULES: list[tuple[str, Callable[[date], bool]]] = [
    (
        "Labor Day",
        lambda d: d.month == 9
        and d.weekday() == calendar.MONDAY
        and nth_weekday(d) == 1,
    ),
    (
        "Thanksgiving Day",
        lambda d: d.month == 11
        and d.weekday() == calendar.THURSDAY
        and nth_weekday(d) == 4,
    ),
    (
        "Day after Thanksgiving",
        lambda d: d.month == 11
        and d.weekday() == calendar.FRIDAY
        and d.day > 1
        and nth_weekday(d - timedelta(days=1)) == 4,
    ),
    (
        "Memorial Day",
        lambda d: d.month == 5
        and d.weekday() == calendar.MONDAY
        and nth_weekday_from_end(d) == 1,
    ),
    (
        "Martin Luther King Jr. Day",
        lambda d: d.month == 1
        and d.weekday() == calendar.MONDAY
        and nth_weekday(d) == 3,
    ),
]


def _holiday_usa(day: date) -> Optional[Holiday]:
    fixed = _fixed(day, _USA_FIXED)
    if fixed:
        return fixed
    for name, rule in _USA_RULES:
        if rule(day):
            return Holiday(name)
    return None


def nth_weekday(day: date) -> int:
    """How many times day's weekday has occurred in its month up to and including day."""
    return (day.day - 1) // 7 + 1


def nth_weekday_from_end(day: date) -> int:
    """How many times day's weekday occurs from day through month end; 1 means last."""
    last = calendar.monthrange(day.year, day.month)[1]
    return (last - day.day) // 7 + 1


def _quot(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _mod(a: int, n: int) -> int:
    return ((a % n) + n) % n


def easter(year: int) -> date:
    """Western (Gregorian) Easter Sunday, integer-only closed form."""
    y = year
    c = _quot(y, 100)
    n = _mod(y, 19)
    i = _mod(c - _quot(c, 4) - _quot(c - _quot(c - 17, 25), 3) + 19 * n + 15, 30)
    i -= _quot(i, 28) * (
        1 - _quot(i, 28) * _quot(29, i + 1) * _quot(21 - n, 11)
    )
    l = i - _mod(y + _quot(y, 4) + i + 2 - c + _quot(c, 4), 7)  # noqa: E741
    month = 3 + _quot(l + 40, 44)
    day = l + 28 - 31 * _quot(month, 4)
    return date(y, month, day)
