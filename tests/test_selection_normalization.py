from __future__ import annotations

import math

import pytest

from surface_explorer.selection import (
    SelectionState,
    clamp_index,
    full_extent_selection,
    normalize_selection,
    round_half_up,
)
from surface_explorer.slices import slice_by_column, slice_by_row
from surface_explorer.window import extract_window


def _state(**overrides) -> SelectionState:
    base = dict(col_min=0.0, col_max=8.0, row_min=0.0, row_max=5.0, col_index=3, row_index=2)
    base.update(overrides)
    return SelectionState(**base)


def test_full_extent_selection_covers_grid(grid) -> None:
    state = full_extent_selection(grid, col_index=3, row_index=2)
    assert state.window == (0.0, 8.0, 0.0, 5.0)
    assert state.focus == (3, 2)


def test_focus_index_clamps_to_bounds(grid) -> None:
    assert normalize_selection(grid, _state(col_index=-5)).col_index == 0
    assert normalize_selection(grid, _state(col_index=9 + 10)).col_index == 8
    assert normalize_selection(grid, _state(row_index=-1)).row_index == 0
    assert normalize_selection(grid, _state(row_index=100)).row_index == 5


def test_focus_index_rounds_half_up(grid) -> None:
    assert normalize_selection(grid, _state(col_index=3.6)).col_index == 4
    assert normalize_selection(grid, _state(col_index=2.5)).col_index == 3
    assert normalize_selection(grid, _state(col_index=2.49)).col_index == 2
    assert isinstance(normalize_selection(grid, _state(col_index=2.5)).col_index, int)


def test_inverted_window_is_reordered_without_changing_values(grid) -> None:
    state = normalize_selection(grid, _state(col_min=8, col_max=2))
    assert (state.col_min, state.col_max) == (2.0, 8.0)


def test_window_is_clamped_to_grid_extent(grid) -> None:
    state = normalize_selection(grid, _state(col_min=-3, col_max=20, row_min=-1, row_max=2.5))
    assert state.window == (0.0, 8.0, 0.0, 2.5)


def test_collapsed_window_outside_extent_becomes_point_at_edge(grid) -> None:
    state = normalize_selection(grid, _state(col_min=-3, col_max=-3))
    assert state.col_min == state.col_max == 0.0


def test_collapsed_window_inside_extent_is_preserved(grid) -> None:
    state = normalize_selection(grid, _state(row_min=3.3, row_max=3.3))
    assert state.row_min == state.row_max == 3.3


def test_non_finite_input_is_repaired(grid) -> None:
    state = normalize_selection(
        grid,
        _state(col_min=math.nan, col_max=math.inf, row_min=-math.inf, row_max=math.nan, col_index=math.nan),
    )
    assert state.window == (0.0, 8.0, 0.0, 5.0)
    assert state.col_index == 0


def test_window_and_focus_are_independent(grid) -> None:
    state = normalize_selection(grid, _state(col_min=0, col_max=1, col_index=7))
    assert state.col_index == 7
    assert (state.col_min, state.col_max) == (0.0, 1.0)


def test_normalize_is_idempotent_on_example(grid) -> None:
    once = normalize_selection(grid, _state(col_min=12, col_max=-4, row_index=7.7))
    assert normalize_selection(grid, once) == once


def test_clamp_index_and_rounding_helpers() -> None:
    assert round_half_up(-0.5) == 0
    assert round_half_up(1.5) == 2
    assert clamp_index(math.inf, 4) == 3
    assert clamp_index(-math.inf, 4) == 0
    assert clamp_index(1.2, 1) == 0


def test_rounding_matches_browser_math_round_just_below_half() -> None:
    below_half = 0.49999999999999994
    assert round_half_up(below_half) == 0
    assert clamp_index(below_half, 9) == 0
    assert round_half_up(-2.5) == -2
    assert round_half_up(2.5) == 3


@pytest.mark.parametrize("huge", [10**400, -(10**400)])
def test_integers_beyond_float_range_are_clamped(grid, huge) -> None:
    as_index = normalize_selection(grid, _state(col_index=huge, row_index=huge))
    assert as_index.focus == ((0, 0) if huge < 0 else (8, 5))

    as_bound = normalize_selection(grid, _state(col_min=huge, row_max=huge))
    end_col, end_row = (0.0, 0.0) if huge < 0 else (8.0, 5.0)
    assert (as_bound.col_min, as_bound.col_max) == tuple(sorted((end_col, 8.0)))
    assert (as_bound.row_min, as_bound.row_max) == tuple(sorted((0.0, end_row)))

    assert clamp_index(huge, 4) == (0 if huge < 0 else 3)
    assert extract_window(grid, _state(col_min=huge, col_max=huge)).shape[1] == 1
    assert slice_by_column(grid, huge).fixed_index == (0 if huge < 0 else 8)
    assert slice_by_row(grid, huge).fixed_index == (0 if huge < 0 else 5)


def test_merged_applies_partial_update_and_rejects_unknown_fields() -> None:
    state = _state()
    assert state.merged({"col_index": 5}).col_index == 5
    assert state.col_index == 3
    with pytest.raises(KeyError, match="Unknown selection field"):
        state.merged({"zoom": 2})


def test_diff_helpers() -> None:
    a = _state()
    assert a.replace(col_max=7).window_differs(a)
    assert not a.replace(col_max=7).focus_differs(a)
    assert a.replace(row_index=0).focus_differs(a)
