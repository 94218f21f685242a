from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from .text_report import summarize

_BUCKET_COLORS = {
    "holiday": "#C4B5FD",
    "sunday": "#6366F1",
    "saturday": "#3B82F6",
    "officehours": "#34D399",
    "weekday": "#6EE7B7",
}


def _save(fig: plt.Figure, path: Path) -> None:
    """Persist the plot and release the figure."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=fig.dpi, bbox_inches="tight")
    plt.close(fig)


def plot_bucket_hours(df: pd.DataFrame, path: Path, title: str = "") -> bool:
    """
    Stacked horizontal bars of on-call hours per user, one segment per bucket.

    Returns False (and writes nothing) when there is nothing to plot.
    """
    summary = summarize(df)
    if summary.empty:
        return False

    buckets = list(_BUCKET_COLORS)
    users = list(summary.index)
    fig_height = 2 + len(users) * 0.35
    fig, ax = plt.subplots(figsize=(8, fig_height), dpi=150)

    left = [0.0] * len(users)
    for bucket in buckets:
        vals = [float(v) for v in summary[bucket]]
        if not any(vals):
            continue
        ax.barh(
            users,
            vals,
            left=left,
            label=bucket,
            color=_BUCKET_COLORS[bucket],
            height=0.7,
            edgecolor="none",
        )
        left = [a + b for a, b in zip(left, vals)]

    ax.invert_yaxis()
    ax.set_xlabel("Hours on call")
    ax.set_title(title or "On-call hours by bucket", pad=25)
    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)
    ax.legend(
        loc="upper center",
        bbox_to_anchor=(0.5, 1.12),
        ncol=len(buckets),
        frameon=False,
    )
    fig.tight_layout()
    _save(fig, Path(path))
    return True
