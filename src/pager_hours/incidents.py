from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable


@dataclass(frozen=True, slots=True)
class Incident:
    created_at: datetime
    escalation_policy_id: str


def utc_slot(ts: datetime) -> tuple[date, int]:
    """(UTC calendar day, UTC hour) of an aware timestamp."""
    if ts.tzinfo is None:
        raise ValueError(f"Timestamp {ts.isoformat()} has no timezone")
    utc = ts.astimezone(timezone.utc)
    return utc.date(), utc.hour


class IncidentIndex:
    """
    Incidents of one escalation policy, bucketed by UTC day and hour.

    Only presence matters to the report: an hour with three incidents is still
    a single hour with incidents.
    """

    def __init__(self, incidents: Iterable[Incident], policy_id: str) -> None:
        self.policy_id = policy_id
        self._slots: dict[date, dict[int, list[Incident]]] = defaultdict(dict)
        self.total = 0
        for incident in incidents:
            if incident.escalation_policy_id != policy_id:
                continue
            day, hour = utc_slot(incident.created_at)
            self._slots[day].setdefault(hour, []).append(incident)
            self.total += 1

    def occurred(self, ts: datetime) -> bool:
        day, hour = utc_slot(ts)
        return bool(self._slots.get(day, {}).get(hour))

    def at(self, ts: datetime) -> list[Incident]:
        day, hour = utc_slot(ts)
        return list(self._slots.get(day, {}).get(hour, []))

    def __len__(self) -> int:
        return self.total
