from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping

from pager_hours.holidays import Region


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


DEFAULT_REGION_BY_TIMEZONE: Mapping[str, Region] = _frozen(
    {
        "Europe/Berlin": Region.BERLIN,
        "Europe/Sofia": Region.BULGARIA,
        "America/Los_Angeles": Region.CALIFORNIA,
        "America/New_York": Region.NEW_YORK,
    }
)

# PagerDuty still hands out Rails-style zone names for older accounts
DEFAULT_TIMEZONE_ALIASES: Mapping[str, str] = _frozen(
    {
        "Berlin": "Europe/Berlin",
        "Sofia": "Europe/Sofia",
        "Pacific Time (US & Canada)": "America/Los_Angeles",
        "Eastern Time (US & Canada)": "America/New_York",
    }
)


@dataclass
class Config:

    # Office hours on the worker's local clock
    OFFICE_START: int = 10
    OFFICE_END: int = 18

    # Night window for incident hours (UTC hour of the schedule cursor)
    NIGHT_START: int = 0
    NIGHT_END: int = 8

    # Holiday wins over Sunday; False restores the legacy Sunday-first order
    HOLIDAY_BEFORE_SUNDAY: bool = True

    # Report destination
    GDRIVE_DIRECTORY: str = "On-Call Hours"
    DATE_FORMAT: str = "%Y-%m-%d"

    REGION_BY_TIMEZONE: Mapping[str, Region] = field(
        default_factory=lambda: DEFAULT_REGION_BY_TIMEZONE
    )
    TIMEZONE_ALIASES: Mapping[str, str] = field(
        default_factory=lambda: DEFAULT_TIMEZONE_ALIASES
    )

    def __post_init__(self) -> None:
        self.REGION_BY_TIMEZONE = _frozen(dict(self.REGION_BY_TIMEZONE))
        self.TIMEZONE_ALIASES = _frozen(dict(self.TIMEZONE_ALIASES))

    def validate(self):
        """
        Validate the Config object has sensible values before a report run.
        """
        for attr in ("OFFICE_START", "OFFICE_END", "NIGHT_START", "NIGHT_END"):
            val = getattr(self, attr)
            if not (0 <= val <= 24):
                raise ValueError(f"{attr} must be within [0, 24].")
        if self.OFFICE_START >= self.OFFICE_END:
            raise ValueError("Require OFFICE_START < OFFICE_END.")
        if self.NIGHT_START >= self.NIGHT_END:
            raise ValueError("Require NIGHT_START < NIGHT_END.")
        if not self.GDRIVE_DIRECTORY.strip():
            raise ValueError("GDRIVE_DIRECTORY must not be empty.")
        unknown = {
            tz: region
            for tz, region in self.REGION_BY_TIMEZONE.items()
            if not isinstance(region, Region)
        }
        if unknown:
            raise ValueError(f"Unsupported regions in REGION_BY_TIMEZONE: {unknown}")

    def is_office_hour(self, hour: int) -> bool:
        return hours_between(self.OFFICE_START, self.OFFICE_END)(hour)

    def is_night_hour(self, hour: int) -> bool:
        return hours_between(self.NIGHT_START, self.NIGHT_END)(hour)


def hours_between(
    start: float, end: float, *, period: int = 24
) -> Callable[[int], bool]:
    """
    Start inclusive, end exclusive, wrapping on 'period'.
    Works with float boundaries (e.g., 22.5 to 6.0). Predicate takes int hour index.
    """
    length = (float(end) - float(start)) % period
    if length == 0 and end != start:
        length = period  # e.g. 0 to 24 covers the whole day
    start = float(start) % period
    return lambda h: 0 <= h < period and ((h - start) % period) < length


cfg = Config()
