from __future__ import annotations

import pandas as pd

from pager_hours.buckets import Bucket

from .csv_report import CSV_HEADERS


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-user totals for the whole period.

    Columns are the buckets (on-call hours) in their booking priority, followed
    by total on-call hours and both incident-hour totals.
    """
    bucket_order = [b.value for b in Bucket]
    if df.empty:
        return pd.DataFrame(
            columns=bucket_order + ["Total", "Incidents/Day", "Incidents/Night"]
        )

    _, user, _, _, kind, oncall, inc_day, inc_night, *_ = CSV_HEADERS
    hours = df.pivot_table(
        index=user,
        columns=kind,
        values=oncall,
        aggfunc="sum",
        fill_value=0,
    ).reindex(columns=bucket_order, fill_value=0)
    hours.columns.name = None

    incidents = df.groupby(user)[[inc_day, inc_night]].sum()
    incidents.columns = ["Incidents/Day", "Incidents/Night"]

    out = hours.assign(Total=hours.sum(axis=1)).join(incidents)
    return out.astype(int)


def render_summary(df: pd.DataFrame) -> str:
    summary = summarize(df)
    if summary.empty:
        return "On-call summary: (no data)"
    return "On-call summary (hours per user):\n" + summary.to_string()
