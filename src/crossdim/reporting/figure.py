"""Plotly figure generation from dimension output.

make_figure turns a dimension snapshot (Dimension.get_data()) into a Plotly
figure dict: one trace per visible series, x/y taken from data point fields.
Colors assigned by ``series_color``/``data_color`` are used when present.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import plotly.graph_objects as go

from crossdim.utils.logging import get_logger

logger = get_logger(__name__)

# Opacity for series outside the current selection.
UNSELECTED_OPACITY = 0.3


def make_figure(
    data: list[dict[str, Any]],
    x: str,
    y: str,
    *,
    kind: str = "scatter",
    mode: str = "lines+markers",
    selection: Optional[Iterable[Any]] = None,
    title: Optional[str] = None,
    show_legend: bool = True,
) -> dict:
    """Build a Plotly figure dict.

    Args:
        data: Output of Dimension.get_data().
        x: Data point field for the x axis.
        y: Data point field for the y axis.
        kind: "scatter" or "bar".
        mode: Scatter mode (ignored for bar).
        selection: Series names to emphasize; others are drawn faded.
            None or empty draws every series at full opacity.
        title: Figure title.
        show_legend: Show the legend.

    Returns:
        Plotly figure dictionary.

    Raises:
        ValueError: If kind is not "scatter" or "bar".
    """
    if kind not in ("scatter", "bar"):
        raise ValueError(f"kind must be 'scatter' or 'bar', got {kind!r}")

    selected = {str(v) for v in selection} if selection else set()

    fig = go.Figure()
    for series in data:
        if not series.get("visible", True):
            continue
        points = series.get("data_points", [])
        xs = [p.get(x) for p in points]
        ys = [p.get(y) for p in points]
        opacity = 1.0 if not selected or series["name"] in selected else UNSELECTED_OPACITY

        point_colors = [p.get("marker_color") for p in points]
        marker: dict[str, Any] = {}
        if any(c is not None for c in point_colors):
            marker["color"] = point_colors
        elif series.get("color") is not None:
            marker["color"] = series["color"]

        if kind == "bar":
            fig.add_trace(go.Bar(
                x=xs,
                y=ys,
                name=series["name"],
                marker=marker,
                opacity=opacity,
            ))
        else:
            line = {"color": series["line_color"]} if series.get("line_color") is not None else {}
            fig.add_trace(go.Scatter(
                x=xs,
                y=ys,
                mode=mode,
                name=series["name"],
                marker=marker,
                line=line,
                opacity=opacity,
            ))

    fig.update_layout(
        margin=dict(l=40, r=20, t=40, b=40),
        xaxis_title=x,
        yaxis_title=y,
        showlegend=show_legend,
        uirevision="keep",
    )
    if title:
        fig.update_layout(title=title)
    if kind == "bar":
        fig.update_layout(barmode="group")

    logger.debug("Figure generated: %s traces", len(fig.data))
    return fig.to_dict()
