from __future__ import annotations

from typing import Iterable

import pandas as pd

from .data_models import ReportRow

# Consumers depend on the column count; keep the two reserved columns.
CSV_HEADERS = [
    "Date",
    "User",
    "Time Zone",
    "Location",
    "Type",
    "Hours On-Call",
    "Hours with Incidents/Day",
    "Hours with Incidents/Night",
    "Additional Hours/Day",
    "Additional Hours/Night",
]

COUNT_COLUMNS = CSV_HEADERS[5:]


def rows_to_frame(
    rows: Iterable[ReportRow], date_format: str = "%Y-%m-%d"
) -> pd.DataFrame:
    """One DataFrame line per report row, in emission order."""
    df = pd.DataFrame(
        [row.as_record(date_format) for row in rows], columns=CSV_HEADERS
    )
    return df.astype({col: int for col in COUNT_COLUMNS})


def render_csv(rows: Iterable[ReportRow], date_format: str = "%Y-%m-%d") -> bytes:
    """CSV bytes with a header line, even when there are no rows."""
    df = rows_to_frame(rows, date_format)
    return df.to_csv(index=False, lineterminator="\n").encode("utf-8")
