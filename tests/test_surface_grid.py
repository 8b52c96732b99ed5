from __future__ import annotations

import numpy as np
import pytest

from surface_explorer.surface_grid import (
    EXPIRY_LABELS,
    STRIKE_LABELS,
    SurfaceGrid,
    build_grid,
    option_surface_value,
)


def test_option_surface_has_strike_columns_and_expiry_rows(grid) -> None:
    assert grid.shape == (6, 9)
    assert grid.col_labels == STRIKE_LABELS
    assert grid.row_labels == EXPIRY_LABELS
    assert grid.col_coords.tolist() == list(range(9))
    assert grid.row_coords.tolist() == list(range(6))
    assert grid.values[2, 3] == pytest.approx(option_surface_value(3, 2, 9, 6))


def test_grid_arrays_are_read_only(grid) -> None:
    with pytest.raises(ValueError):
        grid.values[0, 0] = 1.0
    with pytest.raises(ValueError):
        grid.col_coords[0] = -1.0


def test_build_grid_copies_inputs_and_calls_value_fn_per_cell() -> None:
    calls = []

    def value_fn(c, r):
        calls.append((c, r))
        return 10 * r + c

    coords = np.array([0.0, 2.5])
    g = build_grid(["a", "b", "c"], ["x", "y"], value_fn, col_coords=coords)
    coords[0] = 99.0

    assert len(calls) == 6
    assert g.values.tolist() == [[0.0, 1.0], [10.0, 11.0], [20.0, 21.0]]
    assert g.col_coords.tolist() == [0.0, 2.5]
    assert g.col_extent == (0.0, 2.5)
    assert g.row_extent == (0.0, 2.0)


def test_grid_rejects_shape_mismatch() -> None:
    with pytest.raises(ValueError, match="values has shape"):
        SurfaceGrid(
            row_labels=("a", "b"),
            col_labels=("x",),
            row_coords=[0, 1],
            col_coords=[0],
            values=[[1.0, 2.0], [3.0, 4.0]],
        )


def test_grid_rejects_non_increasing_coords() -> None:
    with pytest.raises(ValueError, match="strictly increasing"):
        SurfaceGrid(
            row_labels=("a", "b"),
            col_labels=("x",),
            row_coords=[1, 1],
            col_coords=[0],
            values=[[1.0], [2.0]],
        )


def test_grid_rejects_empty_axes() -> None:
    with pytest.raises(ValueError):
        build_grid([], ["x"], lambda c, r: 0.0)


def test_grid_equality_compares_contents(grid) -> None:
    other = build_grid(grid.row_labels, grid.col_labels, lambda c, r: grid.values[r, c])
    assert other == grid
    assert repr(grid) == "SurfaceGrid(rows=6, cols=9)"
