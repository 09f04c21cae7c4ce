"""Dimension: one independently filterable grouping/aggregation view.

Provides Dimension, the main entry point: records go in through
``add_one``/``add_many``, filters from other dimensions come in through
``add_filter``/``remove_filter``/``replace_filter``/``clear_filters``, and the
dimension's own selection goes out as a Filter through the ``"selection"``
event. Every mutating call ends with exactly one post-processing pass that
rebuilds the output snapshot and emits ``"change"``.

**Public API:**

- **add_one(record)** / **add_many(records)** / **add_frame(df)**: add input records.
- **refresh()**: rebuild all aggregates from the raw records.
- **get_data()** / **find_series(value)** / **find_data_point(series, group)**: read output.
- **select(values)** / **clear_selection()** / **get_selection()** / **get_filter()**: own selection.
- **has_filter(f)** / **add_filter(f)** / **remove_filter(f)** / **replace_filter(f)** / **clear_filters()**.
- **on(event, handler)** / **off(event, handler)**: ``"change"`` (no payload), ``"selection"`` (Filter).

Exceptions raised by user-supplied functions propagate unmodified and may
leave aggregates partially updated; call ``refresh()`` to recover.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

import pandas as pd

from crossdim.utils.logging import get_logger
from crossdim.dimension.aggregation import AggregationEngine
from crossdim.dimension.config import DimensionConfig
from crossdim.dimension.errors import ConfigurationError
from crossdim.dimension.events import EventEmitter
from crossdim.dimension.filter_chain import FilterChain
from crossdim.dimension.filters import Filter, same_selection
from crossdim.dimension.keys import normalize_key
from crossdim.dimension.post_process import build_snapshot
from crossdim.reporting.frame import records_from_frame

logger = get_logger(__name__)

FilterRef = Union[Filter, str]


@dataclass(frozen=True)
class DimensionStats:
    """Diagnostic counters for a dimension."""
    id: Optional[str]
    raw: int
    included: int
    excluded: int
    filters: tuple[str, ...]
    series: int
    data_points: int

    def __str__(self) -> str:
        filters = ", ".join(self.filters) if self.filters else "-"
        return (
            f"Dimension {self.id}: all data={self.raw} filters applied={filters} "
            f"excluded={self.excluded} included={self.included} "
            f"series={self.series} groups={self.data_points}"
        )


def _filter_id(flt: FilterRef) -> str:
    return flt.id if isinstance(flt, Filter) else flt


class Dimension(EventEmitter):
    """Incrementally maintained series/data point aggregates with cross-dimension filtering.

    Args:
        config: A DimensionConfig. Keyword options override its fields.
        **options: DimensionConfig fields (used alone when config is None).

    Raises:
        ConfigurationError: If a required grouping/reducing function is missing.
    """

    def __init__(self, config: Optional[DimensionConfig] = None, **options: Any) -> None:
        super().__init__()
        if config is None:
            config = DimensionConfig.from_dict(options)
        elif options:
            config = dataclasses.replace(config, **options)
        self.config = config

        self.id = config.id
        self.name = config.display_name
        self.verbose = config.verbose

        self.filter_predicate = config.filter_predicate or config.group_series
        self.filter_factory = config.filter_factory

        self._chain = FilterChain()
        self._engine = AggregationEngine(config, self._chain)

        self._selection: list[Any] = list(config.selection)
        self._own_filter: Optional[Filter] = None
        self._snapshot: dict[str, dict[str, Any]] = {}
        self.data: list[dict[str, Any]] = []

        self._update_own_filter()
        if config.data is not None:
            self.add_many(config.data)

    def __repr__(self) -> str:
        return f"Dimension(id={self.id!r}, series={len(self.data)}, filters={self._chain.ids()!r})"

    # ------------------------------------------------------------------
    # Record state
    # ------------------------------------------------------------------

    @property
    def raw_data(self) -> list[Any]:
        return self._engine.raw_data

    @property
    def included_data(self) -> list[Any]:
        return self._engine.included_data

    @property
    def excluded_data(self) -> list[Any]:
        return self._engine.excluded_data

    @property
    def applied_filters(self) -> list[Filter]:
        return list(self._chain)

    # ------------------------------------------------------------------
    # Adding data
    # ------------------------------------------------------------------

    def add_many(self, records: Iterable[Any]) -> None:
        """Add a batch of records, then post-process once.

        Raises:
            ConfigurationError: If records is not a sequence of records
                (e.g. a single dict, a string, or a non-iterable).
        """
        if isinstance(records, pd.DataFrame):
            records = records_from_frame(records)
        if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
            raise ConfigurationError(
                f"Must pass in a sequence of records, got {type(records).__name__}"
            )

        for record in records:
            self._engine.add_record(record)
        self._post_process()

    def add_one(self, record: Any) -> None:
        self._engine.add_record(record)
        self._post_process()

    def add_frame(self, df: pd.DataFrame) -> None:
        """Add every row of df as a record dict."""
        self.add_many(records_from_frame(df))

    def refresh(self) -> None:
        """Clear all series and reductions and reprocess the raw records."""
        self._reprocess()
        self._post_process()

    def _reprocess(self) -> None:
        raw_data = self._engine.reset()
        for record in raw_data:
            self._engine.add_record(record)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def get_data(self) -> list[dict[str, Any]]:
        """Shallow copy of each output series (data point dicts are shared)."""
        return [dict(series) for series in self.data]

    def find_series(self, value: Any) -> Optional[dict[str, Any]]:
        """Output series for a group_series value, or None.

        Looks up by the extractor value first (``find_series(1)`` for an int
        key). A string that matches no key is then tried as a series ``name``,
        so ``find_series(s["name"])`` works for a series from get_data() as
        long as exactly one series has that name.
        """
        series = self._snapshot.get(normalize_key(value))
        if series is not None or not isinstance(value, str):
            return series
        named = [s for s in self._snapshot.values() if s["name"] == value]
        return named[0] if len(named) == 1 else None

    def find_data_point(self, series_value: Any, group_value: Any) -> Optional[dict]:
        """Data point for (group_series value, group_data value), or None."""
        return self._engine.store.find_data_point(series_value, group_value)

    def stats(self) -> DimensionStats:
        return DimensionStats(
            id=self.id,
            raw=len(self._engine.raw_data),
            included=len(self._engine.included_data),
            excluded=len(self._engine.excluded_data),
            filters=tuple(self._chain.ids()),
            series=len(self._engine.store),
            data_points=self._engine.store.data_point_count(),
        )

    # ------------------------------------------------------------------
    # Own selection (exported to other dimensions)
    # ------------------------------------------------------------------

    def select(self, new_selection: Optional[Iterable[Any]] = None) -> None:
        """Select values on this dimension.

        Builds the filter this dimension exports to OTHER dimensions; it is
        never applied to this dimension. Selecting the same values (in any
        order) again is a no-op. A bare string (or bytes) is one value, not a
        sequence of characters.
        """
        if new_selection is None:
            new_selection = []
        elif isinstance(new_selection, (str, bytes)):
            new_selection = [new_selection]
        else:
            new_selection = list(new_selection)
        if same_selection(new_selection, self._selection):
            return
        self._selection = new_selection
        logger.debug("Dimension %r selection -> %r", self.id, new_selection)
        self._update_own_filter()

    def clear_selection(self) -> None:
        self.select([])

    def get_selection(self) -> list[Any]:
        return list(self._selection)

    def get_filter(self) -> Optional[Filter]:
        return self._own_filter

    def _update_own_filter(self) -> None:
        selection = self._selection
        predicate = self.filter_factory(selection, self.filter_predicate) if selection else None
        self._own_filter = Filter(id=self.id, predicate=predicate)
        self.emit("selection", self._own_filter)

    # ------------------------------------------------------------------
    # Filters from other dimensions
    # ------------------------------------------------------------------

    def has_filter(self, flt: FilterRef) -> bool:
        """True if a filter with this id is applied, even one with no predicate."""
        return self._chain.has(_filter_id(flt))

    def add_filter(self, flt: Filter) -> None:
        self._add_filter(flt)
        self._post_process()

    def remove_filter(self, flt: FilterRef) -> None:
        """Remove the filter with this id; no-op (no "change") if it is not applied."""
        filter_id = _filter_id(flt)
        if not self._chain.has(filter_id):
            return
        self._remove_filter(filter_id)
        self._post_process()

    def replace_filter(self, flt: Filter) -> None:
        """Swap the filter with flt.id for flt in one pass; acts as remove_filter if flt has no predicate."""
        if not flt.active:
            self.remove_filter(flt)
            return

        if self.config.reprocess_all_on_filter:
            self._chain.remove(flt.id)
            self._chain.add(flt)
            logger.debug("Dimension %r replaced filter %r (reprocess all)", self.id, flt.id)
            self._reprocess()
        else:
            if self._chain.has(flt.id):
                self._remove_filter(flt.id)
            self._add_filter(flt)
        self._post_process()

    def clear_filters(self) -> None:
        """Remove every applied filter, restoring all excluded records."""
        self._chain.clear()
        self._remove_filter(None)
        self._post_process()

    def _add_filter(self, flt: Filter) -> None:
        self._chain.add(flt)
        if self.config.reprocess_all_on_filter:
            logger.debug("Dimension %r added filter %r (reprocess all)", self.id, flt.id)
            self._reprocess()
            return
        moved = self._engine.exclude_failing(flt)
        logger.debug("Dimension %r added filter %r: %s record(s) excluded", self.id, flt.id, moved)

    def _remove_filter(self, filter_id: Optional[str]) -> None:
        if filter_id is not None:
            self._chain.remove(filter_id)
        if self.config.reprocess_all_on_filter:
            logger.debug("Dimension %r removed filter %r (reprocess all)", self.id, filter_id)
            self._reprocess()
            return
        moved = self._engine.include_passing()
        logger.debug("Dimension %r removed filter %r: %s record(s) included", self.id, filter_id, moved)

    # ------------------------------------------------------------------
    # Post processing
    # ------------------------------------------------------------------

    def _post_process(self) -> None:
        cfg = self.config
        self._snapshot = build_snapshot(
            self._engine.store,
            sort_key=cfg.sort_key,
            sort_fnc=cfg.sort_fnc,
        )
        self.data = list(self._snapshot.values())

        if cfg.post_process is not None:
            cfg.post_process(self.data)

        if self.verbose:
            logger.info("%s", self.stats())

        self.emit("change")
