"""Plotly rendering backend for the surface explorer.

Purpose
-------
Implements the :class:`~surface_explorer.controller.SelectionRenderer`
protocol on top of ``plotly.graph_objects.FigureWidget``. Each handle the
renderer returns *is* the FigureWidget, so the explorer can embed it in the
widget tree and attach click/relayout callbacks to it.

Concepts and structure
----------------------
- ``build_*`` functions are pure: they turn a grid/slice/selection into
  Plotly trace and layout dictionaries. They are what the tests exercise.
- ``PlotlyRenderer`` owns styling (colours, titles) and pushes the built
  dictionaries into widgets inside ``batch_update`` blocks so each refresh is
  one frontend message.

Important gotchas
-----------------
- ``update_surface`` replaces the surface data and the scene axis ranges;
  the camera is left alone, so the user's 3D orbit survives window changes.
- The selection outline is drawn at the minimum of the *displayed* grid so it
  always sits under the surface.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Mapping
from typing import Any, Optional

import numpy as np
import plotly.graph_objects as go

from .selection import SelectionState
from .slices import SliceData
from .surface_grid import SurfaceGrid

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

BASE_LAYOUT: dict[str, Any] = {
    "paper_bgcolor": "#1a1f2b",
    "plot_bgcolor": "#1a1f2b",
    "font": {"color": "#eef2f7"},
    "margin": {"l": 40, "r": 20, "t": 30, "b": 40},
}

OUTLINE_COLOR = "#fbbf24"
DEFAULT_SLICE_COLORS: Mapping[str, str] = {"column": "#38bdf8", "row": "#f97316"}


def build_selection_outline(selection: SelectionState, z_value: float) -> dict[str, Any]:
    """Return a closed ``scatter3d`` rectangle tracing the selection window."""
    return {
        "type": "scatter3d",
        "mode": "lines",
        "x": [selection.col_min, selection.col_max, selection.col_max, selection.col_min, selection.col_min],
        "y": [selection.row_min, selection.row_min, selection.row_max, selection.row_max, selection.row_min],
        "z": [z_value] * 5,
        "line": {"color": OUTLINE_COLOR, "width": 6},
        "hoverinfo": "skip",
        "showlegend": False,
    }


def build_surface_traces(
    grid: SurfaceGrid, selection: SelectionState, *, colorscale: str = "Viridis"
) -> list[dict[str, Any]]:
    """Return ``[surface, outline]`` trace dictionaries for *grid*."""
    z_floor = float(np.min(grid.values))
    return [
        {
            "type": "surface",
            "x": grid.col_coords.tolist(),
            "y": grid.row_coords.tolist(),
            "z": grid.to_nested_lists(),
            "colorscale": colorscale,
            "showscale": True,
        },
        build_selection_outline(selection, z_floor),
    ]


def build_surface_layout(
    grid: SurfaceGrid,
    selection: SelectionState,
    *,
    col_title: str = "Strike",
    row_title: str = "Expiry",
    value_title: str = "Value (Z)",
) -> dict[str, Any]:
    """Return the 3D scene layout; axis ranges follow the selection window."""
    return {
        **BASE_LAYOUT,
        "dragmode": "orbit",
        "scene": {
            "xaxis": {
                "title": {"text": col_title},
                "tickvals": grid.col_coords.tolist(),
                "ticktext": list(grid.col_labels),
                "range": [selection.col_min, selection.col_max],
            },
            "yaxis": {
                "title": {"text": row_title},
                "tickvals": grid.row_coords.tolist(),
                "ticktext": list(grid.row_labels),
                "range": [selection.row_min, selection.row_max],
            },
            "zaxis": {"title": {"text": value_title}},
        },
    }


def build_slice_trace(slice_data: SliceData, line_color: str) -> dict[str, Any]:
    """Return the ``lines+markers`` trace for one slice."""
    return {
        "type": "scatter",
        "mode": "lines+markers",
        "x": slice_data.axis_coords.tolist(),
        "y": slice_data.values.tolist(),
        "name": slice_data.fixed_label,
        "line": {"color": line_color, "width": 2},
        "marker": {"color": line_color, "size": 6},
    }


def build_slice_layout(
    slice_data: SliceData, axis_title: str, *, value_title: str = "Value (Z)"
) -> dict[str, Any]:
    """Return a 2D layout whose x ticks are the slice's axis labels."""
    return {
        **BASE_LAYOUT,
        "xaxis": {
            "title": {"text": axis_title},
            "tickvals": slice_data.axis_coords.tolist(),
            "ticktext": list(slice_data.axis_labels),
        },
        "yaxis": {"title": {"text": value_title}, "fixedrange": True},
    }


def build_data_preview_html(grid: SurfaceGrid, max_rows: int = 4, max_cols: int = 5) -> str:
    """Return an HTML table with the top-left corner of *grid*."""
    rows, cols = grid.shape
    row_count = min(max_rows, rows)
    col_count = min(max_cols, cols)

    header = "".join(f"<th>{html.escape(label)}</th>" for label in grid.col_labels[:col_count])
    body = []
    for r in range(row_count):
        cells = "".join(f"<td>{grid.values[r, c]:.3f}</td>" for c in range(col_count))
        body.append(f"<tr><th>{html.escape(grid.row_labels[r])}</th>{cells}</tr>")
    return (
        '<table class="data-preview-table">'
        f"<tr><th></th>{header}</tr>"
        + "".join(body)
        + "</table>"
    )


def format_readout(grid: SurfaceGrid, selection: SelectionState) -> str:
    """Return ``"Selected: <column label> / <row label>"``."""
    return (
        f"Selected: {grid.col_labels[selection.col_index]} / "
        f"{grid.row_labels[selection.row_index]}"
    )


class PlotlyRenderer:
    """``SelectionRenderer`` backed by Plotly ``FigureWidget`` objects.

    Parameters
    ----------
    col_title, row_title, value_title : str
        Axis titles.
    colorscale : str
        Plotly colorscale name for the surface.
    slice_colors : mapping, optional
        Line colour per slice kind (``"column"``/``"row"``).
    """

    def __init__(
        self,
        *,
        col_title: str = "Strike",
        row_title: str = "Expiry",
        value_title: str = "Value (Z)",
        colorscale: str = "Viridis",
        slice_colors: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.col_title = col_title
        self.row_title = row_title
        self.value_title = value_title
        self.colorscale = colorscale
        self.slice_colors = dict(DEFAULT_SLICE_COLORS)
        if slice_colors:
            self.slice_colors.update(slice_colors)

    def _surface_layout(self, grid: SurfaceGrid, selection: SelectionState) -> dict[str, Any]:
        return build_surface_layout(
            grid,
            selection,
            col_title=self.col_title,
            row_title=self.row_title,
            value_title=self.value_title,
        )

    def render_surface(self, grid: SurfaceGrid, selection: SelectionState) -> go.FigureWidget:
        figw = go.FigureWidget(
            data=build_surface_traces(grid, selection, colorscale=self.colorscale),
            layout=self._surface_layout(grid, selection),
        )
        logger.info("render_surface shape=%s", grid.shape)
        return figw

    def update_surface(self, handle: go.FigureWidget, grid: SurfaceGrid, selection: SelectionState) -> None:
        surface, outline = build_surface_traces(grid, selection, colorscale=self.colorscale)
        with handle.batch_update():
            handle.data[0].update(x=surface["x"], y=surface["y"], z=surface["z"])
            handle.data[1].update(x=outline["x"], y=outline["y"], z=outline["z"])
            handle.update_layout(scene=self._surface_layout(grid, selection)["scene"])
        logger.debug("update_surface shape=%s window=%s", grid.shape, selection.window)

    def render_slice(self, slice_data: SliceData, axis_title: str) -> go.FigureWidget:
        color = self.slice_colors[slice_data.fixed_axis]
        figw = go.FigureWidget(
            data=[build_slice_trace(slice_data, color)],
            layout=build_slice_layout(slice_data, axis_title, value_title=self.value_title),
        )
        logger.info("render_slice axis=%s fixed=%s", axis_title, slice_data.fixed_label)
        return figw

    def update_slice(self, handle: go.FigureWidget, slice_data: SliceData) -> None:
        trace = build_slice_trace(slice_data, self.slice_colors[slice_data.fixed_axis])
        with handle.batch_update():
            handle.data[0].update(x=trace["x"], y=trace["y"], name=trace["name"])
        logger.debug("update_slice fixed=%s index=%d", slice_data.fixed_label, slice_data.fixed_index)
