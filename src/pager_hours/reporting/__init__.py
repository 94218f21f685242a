from __future__ import annotations

from .csv_report import CSV_HEADERS, render_csv, rows_to_frame
from .data_models import ReportRow, Workload
from .text_report import render_summary, summarize

__all__ = [
    "CSV_HEADERS",
    "ReportRow",
    "Workload",
    "render_csv",
    "render_summary",
    "rows_to_frame",
    "summarize",
]
