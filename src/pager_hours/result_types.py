# pager_hours/result_types.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from pager_hours.pagerduty import EscalationPolicy
from pager_hours.reporting.data_models import ReportRow


@dataclass
class ReportResult:
    """Structured output of a report run."""

    policy: EscalationPolicy
    start: datetime
    end: datetime
    rows: list[ReportRow]
    df_report: pd.DataFrame
    payload: bytes
    name: str
    destinations: list[str] = field(default_factory=list)

    @property
    def total_oncall_hours(self) -> int:
        return sum(row.oncall_hours for row in self.rows)
