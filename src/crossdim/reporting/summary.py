"""Per-series summary statistics over data point fields.

``summarize(field)`` builds a ``post_process`` hook that annotates every
output series with min/max/mean/std/sem of one data point field.
``series_stats_frame`` returns the same numbers as a table.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np
import pandas as pd

STATS_COLUMNS = ["n", "min", "max", "mean", "std", "sem"]


def _field_values(series: dict[str, Any], field: str) -> np.ndarray:
    values = [p.get(field) for p in series.get("data_points", [])]
    return np.asarray([v for v in values if v is not None], dtype=float)


def field_stats(values: np.ndarray) -> dict[str, Optional[float]]:
    """n/min/max/mean/std (sample)/sem of values; statistics are None when empty."""
    n = len(values)
    if n == 0:
        return {"n": 0, "min": None, "max": None, "mean": None, "std": None, "sem": None}
    std = float(np.std(values, ddof=1)) if n > 1 else 0.0
    return {
        "n": n,
        "min": float(np.min(values)),
        "max": float(np.max(values)),
        "mean": float(np.mean(values)),
        "std": std,
        "sem": float(std / np.sqrt(n)) if n > 1 else 0.0,
    }


def summarize(field: str, *, prefix: Optional[str] = None) -> Callable[[list[dict[str, Any]]], None]:
    """Return a post_process hook writing ``<prefix>min``, ``<prefix>max``, ... onto each series.

    Args:
        field: Data point field to summarize (e.g. "sum").
        prefix: Key prefix on the series dict. Defaults to ``f"{field}_"``.

    Example:
        Dimension(..., post_process=summarize("sum"))
        # each series then carries sum_min, sum_max, sum_mean, sum_std, sum_sem
    """
    if prefix is None:
        prefix = f"{field}_"

    def hook(data: list[dict[str, Any]]) -> None:
        for series in data:
            stats = field_stats(_field_values(series, field))
            for name in STATS_COLUMNS[1:]:
                series[f"{prefix}{name}"] = stats[name]

    return hook


def series_stats_frame(data: list[dict[str, Any]], field: str) -> pd.DataFrame:
    """One row per series: name, visible, count, then STATS_COLUMNS for field."""
    rows = []
    for series in data:
        row = {
            "name": series["name"],
            "visible": series.get("visible", True),
            "count": series.get("count", 0),
        }
        row.update(field_stats(_field_values(series, field)))
        rows.append(row)
    return pd.DataFrame(rows, columns=["name", "visible", "count", *STATS_COLUMNS])
