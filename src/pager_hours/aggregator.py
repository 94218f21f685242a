"""
Hour-by-hour accounting of on-call time.

Schedule segments are expanded into one event per UTC hour. The aggregator
books every event against (worker, bucket) for the calendar day the cursor is
on and, as soon as the cursor moves into a later UTC day, emits a row for
every non-empty (worker, bucket) of the day just closed and starts over.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Iterator, Optional

from pager_hours.buckets import Bucket, bucket_for
from pager_hours.config import Config, cfg
from pager_hours.errors import InputOrderError
from pager_hours.incidents import IncidentIndex
from pager_hours.reporting.data_models import ReportRow, Workload
from pager_hours.workers import Worker, WorkerDirectory

ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class ScheduleSegment:
    """Half-open stretch ``[start, end)`` during which one user holds the pager."""

    user_id: str
    user_email: str
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        for attr in ("start", "end"):
            ts: datetime = getattr(self, attr)
            if ts.tzinfo is None:
                raise ValueError(f"Segment {attr} {ts.isoformat()} has no timezone")
            object.__setattr__(self, attr, ts.astimezone(timezone.utc))

    def hours(self) -> Iterator[datetime]:
        current = self.start
        while current < self.end:
            yield current
            current += ONE_HOUR


@dataclass(frozen=True)
class HourEvent:
    worker: Worker
    at: datetime  # UTC
    incident: bool = False


def expand_segments(
    segments: Iterable[ScheduleSegment],
    directory: WorkerDirectory,
    incidents: Optional[IncidentIndex] = None,
) -> Iterator[HourEvent]:
    """Walk each segment fully, in the given order, one hour at a time."""
    for segment in segments:
        worker = directory.resolve(segment.user_id)
        for at in segment.hours():
            yield HourEvent(
                worker=worker,
                at=at,
                incident=incidents.occurred(at) if incidents is not None else False,
            )


class HourAggregator:
    """
    Accumulates hour events for the open UTC day and flushes on day change.

    Events may arrive in any order inside the open day (overlapping segments
    are counted independently) but never for a day that was already flushed.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.cfg = config or cfg
        self.day: Optional[date] = None
        self.closed = False
        self._open: dict[Worker, dict[Bucket, Workload]] = {}

    def step(self, event: HourEvent) -> list[ReportRow]:
        """Book one hour; returns the rows of the previous day if it just closed."""
        if self.closed:
            raise InputOrderError("Aggregator was already closed")

        utc = event.at.astimezone(timezone.utc)
        emitted: list[ReportRow] = []
        if self.day is None:
            self.day = utc.date()
        elif utc.date() < self.day:
            raise InputOrderError(
                f"Hour {utc.isoformat()} for {event.worker.email} is before "
                f"{self.day.isoformat()}, which was already flushed"
            )
        elif utc.date() > self.day:
            emitted = self._flush()
            self.day = utc.date()

        local = utc.astimezone(event.worker.zone)
        bucket = bucket_for(local, event.worker.region, self.cfg)
        work = self._open.setdefault(event.worker, {}).setdefault(bucket, Workload())
        work.oncall += 1
        if event.incident:
            if self.cfg.is_night_hour(utc.hour):
                work.incidents_night += 1
            else:
                work.incidents += 1
        return emitted

    def close(self) -> list[ReportRow]:
        """Flush whatever is still open; the aggregator takes no events afterwards."""
        rows = self._flush()
        self.closed = True
        return rows

    def _flush(self) -> list[ReportRow]:
        rows: list[ReportRow] = []
        if self.day is None:
            return rows
        for worker, buckets in self._open.items():
            for bucket in Bucket:
                work = buckets.get(bucket)
                if work is None or work.is_empty():
                    continue
                rows.append(
                    ReportRow(
                        day=self.day,
                        email=worker.email,
                        timezone=worker.timezone,
                        region=worker.region,
                        bucket=bucket,
                        oncall_hours=work.oncall,
                        incident_hours_day=work.incidents,
                        incident_hours_night=work.incidents_night,
                    )
                )
        self._open = {}
        return rows


def aggregate(
    events: Iterable[HourEvent], config: Optional[Config] = None
) -> list[ReportRow]:
    """Run every event through a fresh aggregator and drain it."""
    agg = HourAggregator(config)
    rows: list[ReportRow] = []
    for event in events:
        rows.extend(agg.step(event))
    rows.extend(agg.close())
    return rows
