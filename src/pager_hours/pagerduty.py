"""Thin PagerDuty REST (v2) client covering what the hours report reads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

import requests

from pager_hours.aggregator import ScheduleSegment
from pager_hours.errors import MissingCredentialsError, PagerDutyError
from pager_hours.incidents import Incident
from pager_hours.workers import UserRecord

API_URL = "https://api.pagerduty.com"
ACCEPT = "application/vnd.pagerduty+json;version=2"


@dataclass(frozen=True)
class EscalationPolicy:
    id: str
    name: str
    service_ids: tuple[str, ...] = ()
    service_names: tuple[str, ...] = ()
    schedule_ids: tuple[str, ...] = ()
    schedule_names: tuple[str, ...] = ()


def parse_timestamp(value: str) -> datetime:
    return _utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def _utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _iso(ts: datetime) -> str:
    return _utc(ts).strftime("%Y-%m-%dT%H:%M:%SZ")


def _policy_from_json(body: Mapping[str, Any]) -> EscalationPolicy:
    services = body.get("services") or []
    schedules = [
        target
        for rule in body.get("escalation_rules") or []
        for target in rule.get("targets") or []
        if target.get("type") in ("schedule", "schedule_reference")
    ]
    return EscalationPolicy(
        id=body["id"],
        name=body.get("name") or body.get("summary") or body["id"],
        service_ids=tuple(s["id"] for s in services),
        service_names=tuple(s.get("summary") or s.get("name") or "" for s in services),
        schedule_ids=tuple(s["id"] for s in schedules),
        schedule_names=tuple(
            s.get("summary") or s.get("name") or "" for s in schedules
        ),
    )


class PagerDutyClient:
    """
    Reads users, escalation policies, rendered schedules and incidents.

    Every method returns fully materialised lists; pagination is followed
    until the API reports no more pages. Failures raise PagerDutyError naming
    the request that failed. Nothing is retried.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = API_URL,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 30.0,
        page_limit: int = 100,
    ) -> None:
        if not token:
            raise MissingCredentialsError("PagerDuty token is required")
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.page_limit = page_limit
        self._session = session or requests.Session()
        self._headers = {
            "Accept": ACCEPT,
            "Content-Type": "application/json",
            "Authorization": f"Token token={token}",
        }
        self._users: dict[str, UserRecord] = {}

    # ---------- transport ----------

    def _get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> dict:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self._session.get(
                url,
                params=dict(params or {}),
                headers=self._headers,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise PagerDutyError(f"GET {path} failed: {exc}") from exc

        if resp.status_code != 200:
            raise PagerDutyError(f"GET {path}: status {resp.status_code} != 200")
        try:
            return resp.json()
        except ValueError as exc:
            raise PagerDutyError(f"GET {path}: couldn't decode response") from exc

    def _paginate(
        self, path: str, key: str, params: Optional[Mapping[str, Any]] = None
    ) -> list[dict]:
        items: list[dict] = []
        offset = 0
        while True:
            page_params = {**(params or {}), "limit": self.page_limit, "offset": offset}
            body = self._get(path, page_params)
            page = body.get(key) or []
            items.extend(page)
            if not body.get("more"):
                return items
            if not page:
                raise PagerDutyError(
                    f"GET {path}: API reports more results after offset {offset} "
                    "but returned an empty page"
                )
            offset += len(page)

    # ---------- resources ----------

    def get_user(self, user_id: str) -> UserRecord:
        if user_id not in self._users:
            body = self._get(f"users/{user_id}").get("user")
            if not body:
                raise PagerDutyError(f"GET users/{user_id}: no user in response")
            self._users[user_id] = UserRecord(
                id=body.get("id", user_id),
                email=body.get("email", ""),
                time_zone=body.get("time_zone", ""),
                name=body.get("name", ""),
            )
        return self._users[user_id]

    def get_escalation_policies(self) -> list[EscalationPolicy]:
        return [
            _policy_from_json(p)
            for p in self._paginate("escalation_policies", "escalation_policies")
        ]

    def get_escalation_policy(self, policy_id: str) -> EscalationPolicy:
        body = self._get(f"escalation_policies/{policy_id}").get("escalation_policy")
        if not body:
            raise PagerDutyError(
                f"GET escalation_policies/{policy_id}: no policy in response"
            )
        return _policy_from_json(body)

    def get_schedule_entries(
        self, schedule_id: str, since: datetime, until: datetime
    ) -> list[ScheduleSegment]:
        """Final (rendered) schedule, clipped to ``[since, until)``."""
        path = f"schedules/{schedule_id}"
        body = self._get(
            path, {"since": _iso(since), "until": _iso(until), "time_zone": "UTC"}
        )
        try:
            entries = body["schedule"]["final_schedule"]["rendered_schedule_entries"]
        except (KeyError, TypeError) as exc:
            raise PagerDutyError(f"GET {path}: no rendered schedule entries") from exc

        lo, hi = _utc(since), _utc(until)
        segments: list[ScheduleSegment] = []
        for n, entry in enumerate(entries or []):
            try:
                user = entry.get("user") or {}
                user_id = user["id"]
                start = max(parse_timestamp(entry["start"]), lo)
                end = min(parse_timestamp(entry["end"]), hi)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise PagerDutyError(
                    f"GET {path}: malformed schedule entry #{n} ({exc!r})"
                ) from exc
            if start >= end:
                continue
            email = user.get("email") or self.get_user(user_id).email
            segments.append(
                ScheduleSegment(
                    user_id=user_id, user_email=email, start=start, end=end
                )
            )
        return segments

    def get_incidents(
        self, since: datetime, until: datetime, service_ids: Iterable[str] = ()
    ) -> list[Incident]:
        params: dict[str, Any] = {"since": _iso(since), "until": _iso(until)}
        services = list(service_ids)
        if services:
            params["service_ids[]"] = services

        incidents: list[Incident] = []
        for raw in self._paginate("incidents", "incidents", params):
            policy = raw.get("escalation_policy") or {}
            incidents.append(
                Incident(
                    created_at=parse_timestamp(raw["created_at"]),
                    escalation_policy_id=policy.get("id", ""),
                )
            )
        return incidents
