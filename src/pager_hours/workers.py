from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pager_hours.config import Config, cfg
from pager_hours.errors import UnmappedTimezoneError
from pager_hours.holidays import Region


@dataclass(frozen=True, slots=True)
class UserRecord:
    """A user as the directory reports it; ``time_zone`` is whatever name it uses."""

    id: str
    email: str
    time_zone: str
    name: str = ""


class UserDirectory(Protocol):
    def get_user(self, user_id: str) -> UserRecord: ...


@dataclass(frozen=True, slots=True)
class Worker:
    """
    Someone who carries the pager, resolved to the zone and holiday region
    their hours are booked in.
    """

    email: str
    timezone: str  # IANA key
    region: Region
    name: str = field(default="", compare=False)

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def __repr__(self) -> str:
        return (
            f"Worker(email='{self.email}', tz='{self.timezone}', "
            f"region={self.region.value})"
        )


def resolve_timezone(name: str, config: Config = cfg) -> str:
    """Translate a directory timezone name to an IANA key the region table knows."""
    return config.TIMEZONE_ALIASES.get(name, name)


def worker_from_record(record: UserRecord, config: Config = cfg) -> Worker:
    tz = resolve_timezone(record.time_zone, config)
    region = config.REGION_BY_TIMEZONE.get(tz)
    if region is None:
        raise UnmappedTimezoneError(
            f"No office in {record.time_zone!r} known (user {record.email or record.id})"
        )
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise UnmappedTimezoneError(f"Timezone {tz!r} couldn't be loaded") from exc
    return Worker(email=record.email, timezone=tz, region=region, name=record.name)


class WorkerDirectory:
    """Looks workers up once per run and reuses the answer for every later hour."""

    def __init__(self, users: UserDirectory, config: Optional[Config] = None) -> None:
        self.users = users
        self.cfg = config or cfg
        self._cache: dict[str, Worker] = {}

    def resolve(self, user_id: str) -> Worker:
        if user_id not in self._cache:
            self._cache[user_id] = worker_from_record(
                self.users.get_user(user_id), self.cfg
            )
        return self._cache[user_id]

    def __len__(self) -> int:
        return len(self._cache)
