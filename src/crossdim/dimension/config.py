"""Dimension configuration.

DimensionConfig holds every construction option of a Dimension: the
grouping/reducing functions (required), and the optional split, selection,
filtering, post-processing and display hooks.

Behavior:
- Required functions are validated eagerly in ``__post_init__``; a missing or
  non-callable one raises ConfigurationError.
- ``from_dict`` is tolerant: unknown keys are ignored with a warning.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable, Optional, Sequence, Union

from crossdim.utils.logging import get_logger
from crossdim.dimension.errors import ConfigurationError
from crossdim.dimension.filters import FilterFactory, any_selection_matches_value

logger = get_logger(__name__)

Record = Any
SortKey = Union[str, Callable[[dict], Any]]

_REQUIRED_MESSAGES = {
    "group_series": "Must specify a group_series function to define what to use to group the data into series.",
    "group_data": "Must specify a group_data function to define what makes each data point within a series unique.",
    "reduce_init": "Must specify a reduce_init function to initialize each new grouping for a data point.",
    "reduce_add": "Must specify a reduce_add function to define what happens when a record is added to a group.",
}

_OPTIONAL_CALLABLES = (
    "split",
    "filter_predicate",
    "filter_factory",
    "sort_fnc",
    "series_color",
    "data_color",
    "default_series",
    "post_process",
)


@dataclass
class DimensionConfig:
    """Construction options for a Dimension.

    Attributes:
        id: Dimension identity, used as the id of the exported filter.
        group_series: record -> series key.
        group_data: record -> data point key (within its series).
        reduce_init: record -> new data point dict.
        reduce_add: (data_point, record) -> None, mutates on inclusion.
        reduce_remove: (data_point, record) -> None, mutates on exclusion.
            Required unless reprocess_all_on_filter is True.
        name: Display name; defaults to id.
        split: record -> sequence of derived records.
        selection: Initial selection.
        filter_predicate: record -> value compared against the selection.
            Defaults to group_series.
        filter_factory: (selection, filter_predicate) -> (record -> bool).
        hide_empty_data_points: Drop zero-count data points.
        reprocess_all_on_filter: Rebuild from raw data on every filter change.
        sort_key: Data point field name or key callable for ordering.
        sort_fnc: Two-argument comparator for ordering.
        series_color: series name -> color, assigned once at creation.
        data_color: record -> color, assigned once at data point creation.
        default_series: () -> dict of default fields for each new series.
        post_process: Hook called with the output snapshot list.
        data: Initial records, added at construction.
        verbose: Log a diagnostic line after every post-processing pass.
    """
    id: Optional[str] = None
    group_series: Optional[Callable[[Record], Any]] = None
    group_data: Optional[Callable[[Record], Any]] = None
    reduce_init: Optional[Callable[[Record], dict]] = None
    reduce_add: Optional[Callable[[dict, Record], None]] = None
    reduce_remove: Optional[Callable[[dict, Record], None]] = None
    name: Optional[str] = None
    split: Optional[Callable[[Record], Sequence[Record]]] = None
    selection: list[Any] = field(default_factory=list)
    filter_predicate: Optional[Callable[[Record], Any]] = None
    filter_factory: FilterFactory = any_selection_matches_value
    hide_empty_data_points: bool = True
    reprocess_all_on_filter: bool = False
    sort_key: Optional[SortKey] = None
    sort_fnc: Optional[Callable[[dict, dict], int]] = None
    series_color: Optional[Callable[[str], Any]] = None
    data_color: Optional[Callable[[Record], Any]] = None
    default_series: Optional[Callable[[], dict]] = None
    post_process: Optional[Callable[[list[dict]], None]] = None
    data: Optional[Sequence[Record]] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.selection is None:
            self.selection = []
        else:
            self.selection = list(self.selection)
        if self.filter_factory is None:
            self.filter_factory = any_selection_matches_value
        self.validate()

    def validate(self) -> None:
        """Raise ConfigurationError if a required function is missing or a hook is not callable."""
        for attr, message in _REQUIRED_MESSAGES.items():
            value = getattr(self, attr)
            if value is None:
                logger.error("Dimension %r: %s", self.id, message)
                raise ConfigurationError(message)
            if not callable(value):
                raise ConfigurationError(f"{attr} must be callable, got {type(value).__name__}")

        if self.reduce_remove is None:
            if not self.reprocess_all_on_filter:
                message = (
                    "Must specify a reduce_remove function to define what happens when a record "
                    "is removed from a group (or set reprocess_all_on_filter=True)."
                )
                logger.error("Dimension %r: %s", self.id, message)
                raise ConfigurationError(message)
        elif not callable(self.reduce_remove):
            raise ConfigurationError(
                f"reduce_remove must be callable, got {type(self.reduce_remove).__name__}"
            )

        for attr in _OPTIONAL_CALLABLES:
            value = getattr(self, attr)
            if value is not None and not callable(value):
                raise ConfigurationError(f"{attr} must be callable, got {type(value).__name__}")

        if self.sort_key is not None and not (isinstance(self.sort_key, str) or callable(self.sort_key)):
            raise ConfigurationError("sort_key must be a field name or a callable")

    @property
    def display_name(self) -> str:
        return self.name or str(self.id)

    def to_dict(self) -> dict[str, Any]:
        """Option name -> value (functions included as-is)."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "DimensionConfig":
        """Build a config from an options dict, ignoring unknown keys with a warning."""
        known = {f.name for f in fields(cls)}
        options = {}
        for key, value in d.items():
            if key not in known:
                logger.warning("Unknown dimension option %r, ignoring", key)
                continue
            options[key] = value
        return cls(**options)
