"""Post-processing: derive the output snapshot from the series store.

Each series' ``data_hash`` is the single source of truth for which data
points exist. Empty data points are already gone from it when
``hide_empty_data_points`` is set (they are deleted at removal time), and are
kept with their reduce_remove result otherwise, so no count-based pruning
happens here.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Optional, Union

from crossdim.dimension.store import DataPoint, SeriesStore

SortKey = Union[str, Callable[[DataPoint], Any]]


def sort_points(
    points: list[DataPoint],
    sort_key: Optional[SortKey] = None,
    sort_fnc: Optional[Callable[[DataPoint, DataPoint], int]] = None,
) -> list[DataPoint]:
    """Stable sort of data points by field name / key callable, then comparator."""
    if sort_key is not None:
        if isinstance(sort_key, str):
            field_name = sort_key
            points = sorted(points, key=lambda p: p.get(field_name))
        else:
            points = sorted(points, key=sort_key)
    if sort_fnc is not None:
        points = sorted(points, key=functools.cmp_to_key(sort_fnc))
    return points


def build_snapshot(
    store: SeriesStore,
    *,
    sort_key: Optional[SortKey] = None,
    sort_fnc: Optional[Callable[[DataPoint, DataPoint], int]] = None,
) -> dict[str, dict[str, Any]]:
    """Series key -> output dict, one shallow copy per series, in first-seen order."""
    snapshot = {}
    for series in store:
        points = sort_points(series.data_points(), sort_key, sort_fnc)
        snapshot[series.key] = series.to_dict(points)
    return snapshot
