"""Incremental, cross-filterable aggregation dimension."""

from crossdim.dimension.config import DimensionConfig
from crossdim.dimension.dimension import Dimension, DimensionStats
from crossdim.dimension.errors import ConfigurationError
from crossdim.dimension.filters import (
    Filter,
    any_selection_matches_text,
    any_selection_matches_value,
    any_value_in_selection,
    value_in_range,
)

__all__ = [
    "ConfigurationError",
    "Dimension",
    "DimensionConfig",
    "DimensionStats",
    "Filter",
    "any_selection_matches_text",
    "any_selection_matches_value",
    "any_value_in_selection",
    "value_in_range",
]
