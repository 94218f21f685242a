from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol, Sequence

from pager_hours.aggregator import ScheduleSegment, aggregate, expand_segments
from pager_hours.config import Config, cfg
from pager_hours.errors import (
    ConfigurationError,
    MissingCredentialsError,
    PagerHoursError,
)
from pager_hours.gdrive import DriveClient
from pager_hours.incidents import Incident, IncidentIndex
from pager_hours.pagerduty import EscalationPolicy, PagerDutyClient
from pager_hours.progress import log
from pager_hours.reporting import render_csv, render_summary, rows_to_frame
from pager_hours.result_types import ReportResult
from pager_hours.sinks import DriveSink, LocalSink, ReportSink
from pager_hours.workers import UserRecord, WorkerDirectory


class ProviderClient(Protocol):
    """What a report run needs from the on-call provider."""

    def get_user(self, user_id: str) -> UserRecord: ...
    def get_escalation_policy(self, policy_id: str) -> EscalationPolicy: ...
    def get_schedule_entries(
        self, schedule_id: str, since: datetime, until: datetime
    ) -> list[ScheduleSegment]: ...
    def get_incidents(
        self, since: datetime, until: datetime, service_ids: Sequence[str] = ()
    ) -> list[Incident]: ...


def report_name(start: datetime, end: datetime, config: Config = cfg) -> str:
    return f"{start.strftime(config.DATE_FORMAT)} - {end.strftime(config.DATE_FORMAT)}.csv"


def run_report(
    client: ProviderClient,
    policy_id: str,
    start: datetime,
    end: datetime,
    config: Config | None = None,
    validate_config: bool = True,
) -> ReportResult:
    """
    Fetch everything for one escalation policy and compute the hours report.

    Parameters
    ----------
    client:
        Provider access; `PagerDutyClient` in production.
    policy_id:
        Escalation policy whose first schedule and services are reported on.
    start, end:
        Half-open UTC range ``[start, end)``.
    config:
        Office/night windows and timezone tables. Defaults to `pager_hours.config.cfg`.
    validate_config:
        Toggle to run `Config.validate()` before fetching anything.

    Returns
    -------
    ReportResult
        Rows, DataFrame and CSV bytes; nothing has been written anywhere yet.
    """
    cfg_obj = config or cfg
    if validate_config:
        cfg_obj.validate()
    if end <= start:
        raise ConfigurationError(f"Report range is empty: {start} - {end}")

    policy = client.get_escalation_policy(policy_id)
    if not policy.schedule_ids:
        raise ConfigurationError(f"Escalation policy {policy.name} has no schedule")

    log(f"Calculating hours for {policy.name} between {start} and {end}")
    schedule_id = policy.schedule_ids[0]
    schedule_name = policy.schedule_names[0] if policy.schedule_names else schedule_id
    log(f"- Using schedule {schedule_name}")
    for name in policy.service_names:
        log(f"-- service {name}")

    log("- Getting all incidents for services")
    incidents = IncidentIndex(
        client.get_incidents(start, end, policy.service_ids), policy.id
    )
    log(f"-- {len(incidents)} incidents for policy {policy.name}")

    log("- Getting entries for schedule")
    segments = client.get_schedule_entries(schedule_id, start, end)
    log(f"-- {len(segments)} schedule entries")

    directory = WorkerDirectory(client, cfg_obj)
    rows = aggregate(expand_segments(segments, directory, incidents), cfg_obj)

    return ReportResult(
        policy=policy,
        start=start,
        end=end,
        rows=rows,
        df_report=rows_to_frame(rows, cfg_obj.DATE_FORMAT),
        payload=render_csv(rows, cfg_obj.DATE_FORMAT),
        name=report_name(start, end, cfg_obj),
    )


def publish(result: ReportResult, sinks: Sequence[ReportSink]) -> list[str]:
    for sink in sinks:
        dest = sink.write(result.payload, result.name)
        log(f"- Report stored at {dest}")
        result.destinations.append(dest)
    return result.destinations


def list_escalation_policies(client: PagerDutyClient) -> None:
    for policy in client.get_escalation_policies():
        print(f"- {policy.id} {policy.name}")


def _beginning_of_month(t: datetime) -> datetime:
    return t.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _parse_date(value: str, flag: str, config: Config = cfg) -> datetime:
    try:
        return datetime.strptime(value, config.DATE_FORMAT).replace(
            tzinfo=timezone.utc
        )
    except ValueError:
        raise SystemExit(
            f"Please provide a valid {flag} date (format: {config.DATE_FORMAT})"
        )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    month = _beginning_of_month(datetime.now(timezone.utc))
    if month.month == 1:
        prev_month = month.replace(year=month.year - 1, month=12)
    else:
        prev_month = month.replace(month=month.month - 1)
    parser = argparse.ArgumentParser(
        prog="pager-hours",
        description="Report on-call hours per user, bucketed by holidays, weekends and office hours.",
    )
    parser.add_argument(
        "--pd.token",
        dest="pd_token",
        default=os.environ.get("PAGERDUTY_TOKEN", ""),
        help="PagerDuty API token (default: $PAGERDUTY_TOKEN).",
    )
    parser.add_argument(
        "--from",
        dest="start",
        default=prev_month.strftime(cfg.DATE_FORMAT),
        help="Calculate hours from this date on (inclusive).",
    )
    parser.add_argument(
        "--to",
        dest="end",
        default=month.strftime(cfg.DATE_FORMAT),
        help="Calculate hours before this date (exclusive).",
    )
    parser.add_argument(
        "--policy",
        default="",
        help="Escalation policy to get on call hours and incidents from.",
    )
    parser.add_argument("--office-start", type=int, default=cfg.OFFICE_START)
    parser.add_argument("--office-end", type=int, default=cfg.OFFICE_END)
    parser.add_argument(
        "--sunday-first",
        action="store_true",
        help="Book holidays that fall on a Sunday as sunday (legacy ordering).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the CSV to this file, or into this directory when it ends with '/'.",
    )
    parser.add_argument(
        "--plot", type=Path, default=None, help="Save a bucket chart PNG here."
    )
    parser.add_argument(
        "--gdrive.client-id",
        dest="gdrive_client_id",
        default=os.environ.get("GDRIVE_CLIENT_ID", ""),
    )
    parser.add_argument(
        "--gdrive.secret",
        dest="gdrive_secret",
        default=os.environ.get("GDRIVE_CLIENT_SECRET", ""),
        help="Google Drive client secret.",
    )
    parser.add_argument(
        "--gdrive.token",
        dest="gdrive_token",
        default=os.environ.get("GDRIVE_REFRESH_TOKEN", ""),
        help="Google Drive oauth refresh token.",
    )
    parser.add_argument(
        "--gdrive.code",
        dest="gdrive_code",
        default="",
        help="Google Drive auth code (only needed for a new token).",
    )
    parser.add_argument(
        "--gdrive.directory",
        dest="gdrive_directory",
        default=cfg.GDRIVE_DIRECTORY,
        help="Google Drive directory name where to store spreadsheets.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = parse_args(argv)
    if not args.pd_token:
        raise SystemExit("pager-hours --pd.token=<your-token> (or set PAGERDUTY_TOKEN)")

    config = Config(
        OFFICE_START=args.office_start,
        OFFICE_END=args.office_end,
        HOLIDAY_BEFORE_SUNDAY=not args.sunday_first,
        GDRIVE_DIRECTORY=args.gdrive_directory,
    )
    try:
        config.validate()
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}")

    start = _parse_date(args.start, "--from", config)
    end = _parse_date(args.end, "--to", config)
    if end <= start:
        raise SystemExit(f"--to ({args.end}) must be after --from ({args.start})")

    try:
        client = PagerDutyClient(args.pd_token)
        if not args.policy:
            print("No policy (--policy=abc) specified, available policies:")
            list_escalation_policies(client)
            return 0

        drive: Optional[DriveClient] = None
        if args.gdrive_token or args.gdrive_code:
            drive = DriveClient(
                args.gdrive_client_id,
                args.gdrive_secret,
                refresh_token=args.gdrive_token,
                code=args.gdrive_code,
            )

        result = run_report(client, args.policy, start, end, config=config)

        sinks: list[ReportSink] = [LocalSink(args.output)]
        if drive is not None:
            log("Exporting to Google Drive")
            sinks.append(DriveSink(drive, config.GDRIVE_DIRECTORY, result.policy.name))
        publish(result, sinks)
        if drive is not None and args.gdrive_code:
            log(f"New refresh token: {drive.refresh_token}")
    except MissingCredentialsError as exc:
        raise SystemExit(str(exc))
    except PagerHoursError as exc:
        raise SystemExit(f"Couldn't get hours for policy {args.policy}: {exc}")

    log(render_summary(result.df_report))
    if args.plot is not None:
        from pager_hours.reporting.plots import plot_bucket_hours

        plot_bucket_hours(result.df_report, args.plot, title=result.policy.name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
