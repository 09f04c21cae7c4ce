"""Reporting helpers over dimension output: pandas tables, summary stats, Plotly figures."""

from crossdim.reporting.figure import make_figure
from crossdim.reporting.frame import records_from_frame, to_frame
from crossdim.reporting.summary import field_stats, series_stats_frame, summarize

__all__ = [
    "field_stats",
    "make_figure",
    "records_from_frame",
    "series_stats_frame",
    "summarize",
    "to_frame",
]
