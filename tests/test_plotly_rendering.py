from __future__ import annotations

import plotly.graph_objects as go
import pytest

from surface_explorer.rendering import (
    PlotlyRenderer,
    build_data_preview_html,
    build_slice_layout,
    build_slice_trace,
    build_surface_layout,
    build_surface_traces,
    format_readout,
)
from surface_explorer.selection import SelectionState, full_extent_selection
from surface_explorer.slices import slice_by_column, slice_by_row
from surface_explorer.window import extract_window


def test_surface_traces_include_outline_at_surface_floor(grid) -> None:
    selection = SelectionState(1, 4, 0, 2, 0, 0)
    surface, outline = build_surface_traces(grid, selection)

    assert surface["type"] == "surface"
    assert surface["colorscale"] == "Viridis"
    assert len(surface["z"]) == 6 and len(surface["z"][0]) == 9
    assert outline["x"] == [1, 4, 4, 1, 1]
    assert outline["y"] == [0, 0, 2, 2, 0]
    assert all(z == pytest.approx(float(grid.values.min())) for z in outline["z"])


def test_surface_layout_ticks_and_ranges_follow_window(grid) -> None:
    selection = SelectionState(2, 5, 1, 3, 0, 0)
    sub = extract_window(grid, selection)
    layout = build_surface_layout(sub, selection)

    assert layout["scene"]["xaxis"]["ticktext"] == ["90", "95", "100", "105"]
    assert layout["scene"]["xaxis"]["range"] == [2, 5]
    assert layout["scene"]["yaxis"]["range"] == [1, 3]
    assert layout["scene"]["yaxis"]["title"]["text"] == "Expiry"
    assert layout["paper_bgcolor"] == "#1a1f2b"


def test_slice_trace_and_layout(grid) -> None:
    s = slice_by_column(grid, 4)
    trace = build_slice_trace(s, "#38bdf8")
    layout = build_slice_layout(s, "Expiry")

    assert trace["mode"] == "lines+markers"
    assert trace["y"] == grid.values[:, 4].tolist()
    assert trace["name"] == "100"
    assert layout["xaxis"]["ticktext"] == list(grid.row_labels)
    assert layout["yaxis"]["fixedrange"] is True


def test_data_preview_html_shows_top_left_corner(grid) -> None:
    html = build_data_preview_html(grid, max_rows=2, max_cols=3)
    assert html.count("<tr>") == 3
    assert "<th>90</th>" in html and "<th>95</th>" not in html
    assert "<th>2M</th>" in html and "<th>3M</th>" not in html
    assert f"<td>{grid.values[1, 2]:.3f}</td>" in html


def test_format_readout(grid) -> None:
    assert format_readout(grid, full_extent_selection(grid, 3, 2)) == "Selected: 95 / 3M"


def test_plotly_renderer_updates_widgets_in_place(grid) -> None:
    renderer = PlotlyRenderer(slice_colors={"row": "#123456"})
    full = full_extent_selection(grid)
    surface = renderer.render_surface(extract_window(grid, full), full)
    column_slice = renderer.render_slice(slice_by_column(grid, 0), "Expiry")
    row_slice = renderer.render_slice(slice_by_row(grid, 0), "Strike")

    assert isinstance(surface, go.FigureWidget)
    assert row_slice.data[0].line.color == "#123456"
    assert column_slice.data[0].line.color == "#38bdf8"

    narrow = SelectionState(0, 2, 0, 5, 0, 0)
    renderer.update_surface(surface, extract_window(grid, narrow), narrow)
    assert list(surface.data[0].x) == [0.0, 1.0, 2.0]
    assert tuple(surface.layout.scene.xaxis.range) == (0, 2)

    renderer.update_slice(column_slice, slice_by_column(grid, 5))
    assert list(column_slice.data[0].y) == grid.values[:, 5].tolist()
    assert column_slice.data[0].name == "105"
