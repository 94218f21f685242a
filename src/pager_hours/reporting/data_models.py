from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from pager_hours.buckets import Bucket
from pager_hours.holidays import Region


@dataclass
class Workload:
    """Running counts for one (worker, bucket) on the open day."""

    oncall: int = 0
    incidents: int = 0
    incidents_night: int = 0

    def is_empty(self) -> bool:
        return self.oncall == 0 and self.incidents == 0 and self.incidents_night == 0


@dataclass(frozen=True)
class ReportRow:
    """One flushed (day, worker, bucket) line of the report."""

    day: date
    email: str
    timezone: str
    region: Region
    bucket: Bucket
    oncall_hours: int
    incident_hours_day: int
    incident_hours_night: int

    def as_record(self, date_format: str = "%Y-%m-%d") -> list[object]:
        # last two columns are reserved for additional hours and always zero
        return [
            self.day.strftime(date_format),
            self.email,
            self.timezone,
            self.region.value,
            self.bucket.value,
            self.oncall_hours,
            self.incident_hours_day,
            self.incident_hours_night,
            0,
            0,
        ]
