from __future__ import annotations

from datetime import datetime
from enum import Enum

from pager_hours.config import Config, cfg
from pager_hours.holidays import Region, holiday


class Bucket(str, Enum):
    """Category an on-call hour is booked under; values are the CSV labels."""

    HOLIDAY = "holiday"
    SUNDAY = "sunday"
    SATURDAY = "saturday"
    OFFICE = "officehours"
    WEEKDAY = "weekday"

    def __str__(self) -> str:
        return self.value


_SATURDAY = 5
_SUNDAY = 6


def bucket_for(local: datetime, region: Region, config: Config = cfg) -> Bucket:
    """
    Classify one hour, given in the worker's local time.

    First match wins: holiday, sunday, saturday, office hours, weekday.
    With HOLIDAY_BEFORE_SUNDAY disabled a holiday falling on a Sunday is
    booked as sunday instead.
    """
    if config.HOLIDAY_BEFORE_SUNDAY and holiday(local, region) is not None:
        return Bucket.HOLIDAY

    if local.weekday() == _SUNDAY:
        return Bucket.SUNDAY

    # legacy order: Sunday first, so a holiday on a Sunday stays "sunday";
    # exactly one of the two guarded holiday() lookups runs per hour
    if not config.HOLIDAY_BEFORE_SUNDAY and holiday(local, region) is not None:
        return Bucket.HOLIDAY

    if local.weekday() == _SATURDAY:
        return Bucket.SATURDAY

    if config.is_office_hour(local.hour):
        return Bucket.OFFICE
    return Bucket.WEEKDAY
