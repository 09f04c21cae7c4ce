"""Incremental aggregation of records into series and data points.

AggregationEngine keeps every raw record, classifies each (derived) record
as included or excluded against the filter chain, and applies the user's
reducers so that aggregates always reflect exactly the included records.

Filter changes rescan only the affected partition: adding a filter rescans
the included records, removing one rescans the excluded records. This is
only correct when ``reduce_remove`` exactly undoes ``reduce_add``; dimensions
without such a pair use ``reprocess_all_on_filter`` (see Dimension.refresh).
"""

from __future__ import annotations

from typing import Any

from crossdim.dimension.config import DimensionConfig
from crossdim.dimension.filter_chain import FilterChain
from crossdim.dimension.filters import Filter
from crossdim.dimension.keys import normalize_key
from crossdim.dimension.store import SeriesStore


class AggregationEngine:
    """Owns raw/included/excluded records and the series store for one dimension.

    Attributes:
        raw_data: Every record passed to add_record, in arrival order (pre-split).
        included_data: Derived records currently passing every filter.
        excluded_data: Derived records failing at least one filter.
        store: Series/data point aggregates over included_data.
        chain: Active filters.
    """

    def __init__(self, config: DimensionConfig, chain: FilterChain) -> None:
        self.config = config
        self.chain = chain
        self.store = SeriesStore(
            default_series=config.default_series,
            series_color=config.series_color,
            data_color=config.data_color,
        )
        self.raw_data: list[Any] = []
        self.included_data: list[Any] = []
        self.excluded_data: list[Any] = []

    def reset(self) -> list[Any]:
        """Drop all derived state and return the raw records for replay."""
        raw_data = self.raw_data
        self.raw_data = []
        self.included_data = []
        self.excluded_data = []
        self.store.clear()
        return raw_data

    def add_record(self, record: Any) -> None:
        """Keep record, split it if configured, then classify each derived record."""
        self.raw_data.append(record)
        if self.config.split is not None:
            for derived in self.config.split(record):
                self._classify(derived)
        else:
            self._classify(record)

    def _classify(self, record: Any) -> None:
        if self.chain.matches(record):
            self.included_data.append(record)
            self.process_addition(record)
        else:
            self.excluded_data.append(record)

    def process_addition(self, record: Any) -> None:
        """Count record into its series/data point and apply reduce_add."""
        cfg = self.config
        series = self.store.get_or_create_series(cfg.group_series(record))
        data_point = self.store.get_or_create_data_point(
            series, cfg.group_data(record), record, cfg.reduce_init
        )

        series.count += 1
        data_point["count"] += 1

        cfg.reduce_add(data_point, record)
        if series.count > 0:
            series.visible = True

    def process_removal(self, record: Any) -> None:
        """Undo a previous process_addition for record.

        With hide_empty_data_points, a data point whose count reaches zero is
        dropped outright and reduce_remove is skipped for it.
        """
        cfg = self.config
        series = self.store.find_series(cfg.group_series(record))
        group_key = normalize_key(cfg.group_data(record))
        data_point = series.data_hash[group_key]

        data_point["count"] -= 1
        series.count -= 1

        if data_point["count"] == 0 and cfg.hide_empty_data_points:
            del series.data_hash[group_key]
        else:
            cfg.reduce_remove(data_point, record)

        if series.count == 0:
            series.visible = False

    def exclude_failing(self, flt: Filter) -> int:
        """Move included records that fail flt to excluded. Returns how many moved."""
        still_included = []
        moved = 0
        for record in self.included_data:
            if flt.matches(record):
                still_included.append(record)
            else:
                self.excluded_data.append(record)
                self.process_removal(record)
                moved += 1
        self.included_data = still_included
        return moved

    def include_passing(self) -> int:
        """Move excluded records that now pass every filter to included. Returns how many moved."""
        still_excluded = []
        moved = 0
        for record in self.excluded_data:
            if self.chain.matches(record):
                self.included_data.append(record)
                self.process_addition(record)
                moved += 1
            else:
                still_excluded.append(record)
        self.excluded_data = still_excluded
        return moved
