from __future__ import annotations

from datetime import date

import matplotlib

matplotlib.use("Agg", force=True)
from pager_hours.buckets import Bucket
from pager_hours.holidays import Region
from pager_hours.reporting import ReportRow, rows_to_frame
from pager_hours.reporting.plots import plot_bucket_hours


def make_df():
    return rows_to_frame(
        [
            ReportRow(
                date(2024, 3, 4),
                "a@example.com",
                "Europe/Berlin",
                Region.BERLIN,
                Bucket.OFFICE,
                8,
                0,
                0,
            ),
            ReportRow(
                date(2024, 3, 4),
                "b@example.com",
                "Europe/Sofia",
                Region.BULGARIA,
                Bucket.WEEKDAY,
                16,
                0,
                0,
            ),
        ]
    )


def test_plot_bucket_hours_saves(monkeypatch, tmp_path):
    saved = {}

    def fake_save(fig, path):
        saved["path"] = path
        saved["labels"] = [t.get_text() for t in fig.axes[0].get_legend().get_texts()]

    monkeypatch.setattr("pager_hours.reporting.plots._save", fake_save)

    assert plot_bucket_hours(make_df(), tmp_path / "hours.png", title="Ops")
    assert saved["path"] == tmp_path / "hours.png"
    assert saved["labels"] == ["officehours", "weekday"]


def test_plot_bucket_hours_writes_png(tmp_path):
    target = tmp_path / "charts" / "hours.png"
    assert plot_bucket_hours(make_df(), target)
    assert target.exists()


def test_plot_without_data_writes_nothing(tmp_path):
    target = tmp_path / "hours.png"
    assert not plot_bucket_hours(rows_to_frame([]), target)
    assert not target.exists()
