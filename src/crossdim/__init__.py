"""
crossdim: incremental, cross-filterable aggregation dimensions.

This package provides:
- Dimension: groups records into series of data points via user reducers and
  keeps the aggregates up to date as filters come and go
- Crossfilter: links dimensions so each one's selection filters the others
- Reporting helpers (pandas tables, summary statistics, Plotly figures)
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from crossdim.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library, logging is handled by the parent application's configuration.
"""

import logging

from crossdim.utils.logging import configure_logging, get_logger

from crossdim.crossfilter import Crossfilter
from crossdim.dimension import (
    ConfigurationError,
    Dimension,
    DimensionConfig,
    DimensionStats,
    Filter,
)

# crossdim stays silent until an application calls configure_logging()
# or configures logging itself.
_logger = logging.getLogger("crossdim")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "ConfigurationError",
    "Crossfilter",
    "Dimension",
    "DimensionConfig",
    "DimensionStats",
    "Filter",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
