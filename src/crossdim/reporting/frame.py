"""pandas conversions for dimension input and output.

- records_from_frame: DataFrame rows -> record dicts for Dimension.add_many.
- to_frame: dimension output (get_data()) -> long-format DataFrame, one row
  per data point, with the owning series name in a ``series`` column.
"""

from __future__ import annotations

from typing import Any

import pandas as pd

SERIES_COL = "series"


def records_from_frame(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert DataFrame rows to record dicts; NaN becomes None."""
    if not len(df):
        return []
    clean = df.astype(object).where(pd.notna(df), None)
    return clean.to_dict(orient="records")


def to_frame(data: list[dict[str, Any]], *, include_hidden: bool = True) -> pd.DataFrame:
    """Long-format table of every data point in a dimension snapshot.

    Args:
        data: Output of Dimension.get_data().
        include_hidden: If False, skip series whose ``visible`` is False.

    Returns:
        DataFrame with a ``series`` column followed by the data point fields
        (union over all points, in first-seen order). Empty input gives an
        empty frame with only the ``series`` column.
    """
    rows: list[dict[str, Any]] = []
    columns: dict[str, None] = {SERIES_COL: None}
    for series in data:
        if not include_hidden and not series.get("visible", True):
            continue
        for point in series.get("data_points", []):
            row = {SERIES_COL: series["name"]}
            row.update(point)
            for key in point:
                columns.setdefault(key, None)
            rows.append(row)
    if not rows:
        return pd.DataFrame(columns=[SERIES_COL])
    return pd.DataFrame(rows, columns=list(columns))
