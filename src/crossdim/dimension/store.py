"""Series and data point storage for a dimension.

A Series groups data points by normalized group key. Data points are plain
dicts created by the user's ``reduce_init`` and mutated by ``reduce_add`` /
``reduce_remove``; the store adds a ``count`` field to each.

Series are created lazily and never removed (only hidden when their count
drops to zero). ``clear()`` is the only way to drop them, used by refresh.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from crossdim.dimension.keys import display_name, normalize_key

DataPoint = dict


@dataclass
class Series:
    """Mutable aggregate state for one series.

    Attributes:
        key: Normalized series key.
        name: Display name (``str`` of the extractor value).
        attrs: Default series fields (from ``default_series``), deep-copied per series.
        count: Number of currently included records in this series.
        visible: False once count reaches zero.
        color: Series color, if ``series_color`` is configured.
        data_hash: Normalized group key -> data point dict, in insertion order.
    """
    key: str
    name: str
    attrs: dict[str, Any] = field(default_factory=dict)
    count: int = 0
    visible: bool = True
    color: Any = None
    data_hash: dict[str, DataPoint] = field(default_factory=dict)

    def data_points(self) -> list[DataPoint]:
        return list(self.data_hash.values())

    def to_dict(self, data_points: Optional[list[DataPoint]] = None) -> dict[str, Any]:
        """Output shape: default fields, then visible/count/name/colors and data_points.

        Data point dicts are shared, not copied.
        """
        out = dict(self.attrs)
        out["visible"] = self.visible
        out["count"] = self.count
        out["name"] = self.name
        if self.color is not None:
            out["color"] = self.color
            out["line_color"] = self.color
        out["data_points"] = list(self.data_points() if data_points is None else data_points)
        return out


class SeriesStore:
    """Series key -> Series, preserving first-seen order."""

    def __init__(
        self,
        *,
        default_series: Optional[Callable[[], dict]] = None,
        series_color: Optional[Callable[[str], Any]] = None,
        data_color: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        self._default_series = dict(default_series()) if default_series else {"visible": True}
        self._series_color = series_color
        self._data_color = data_color
        self._series: dict[str, Series] = {}

    def __len__(self) -> int:
        return len(self._series)

    def __iter__(self) -> Iterator[Series]:
        return iter(self._series.values())

    @property
    def series(self) -> list[Series]:
        return list(self._series.values())

    def clear(self) -> None:
        self._series = {}

    def get_or_create_series(self, value: Any) -> Series:
        key = normalize_key(value)
        series = self._series.get(key)
        if series is None:
            attrs = copy.deepcopy(self._default_series)
            visible = bool(attrs.pop("visible", True))
            series = Series(key=key, name=display_name(value), attrs=attrs, visible=visible)
            if self._series_color is not None:
                series.color = self._series_color(series.name)
            self._series[key] = series
        return series

    def get_or_create_data_point(
        self,
        series: Series,
        value: Any,
        record: Any,
        reduce_init: Callable[[Any], DataPoint],
    ) -> DataPoint:
        key = normalize_key(value)
        data_point = series.data_hash.get(key)
        if data_point is None:
            data_point = reduce_init(record)
            data_point["count"] = 0
            if self._data_color is not None:
                color = self._data_color(record)
                data_point["line_color"] = color
                data_point["marker_color"] = color
            series.data_hash[key] = data_point
        return data_point

    def find_series(self, value: Any) -> Optional[Series]:
        return self._series.get(normalize_key(value))

    def find_data_point(self, series_value: Any, group_value: Any) -> Optional[DataPoint]:
        series = self.find_series(series_value)
        if series is None:
            return None
        return series.data_hash.get(normalize_key(group_value))

    def data_point_count(self) -> int:
        return sum(len(s.data_hash) for s in self._series.values())
