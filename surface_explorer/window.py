"""Window extraction: the sub-grid shown by the 3D surface view."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .selection import SelectionState, normalize_selection
from .surface_grid import SurfaceGrid


def nearest_index(coords: Sequence[float] | np.ndarray, target: float) -> int:
    """Return the index whose coordinate is closest to *target*.

    The scan runs in index order and only replaces the best candidate on a
    strictly smaller distance, so ties resolve to the lowest index.
    """
    best_index = 0
    best_distance = abs(float(coords[0]) - target)
    for index in range(1, len(coords)):
        distance = abs(float(coords[index]) - target)
        if distance < best_distance:
            best_index = index
            best_distance = distance
    return best_index


def _axis_indices(coords: np.ndarray, lo: float, hi: float) -> np.ndarray:
    """Return ordered indices with ``lo <= coord <= hi``, or the midpoint fallback."""
    inside = np.flatnonzero((coords >= lo) & (coords <= hi))
    if inside.size:
        return inside
    return np.array([nearest_index(coords, (lo + hi) / 2.0)])


def extract_window(grid: SurfaceGrid, selection: SelectionState) -> SurfaceGrid:
    """Return the part of *grid* that lies inside the selection window.

    Parameters
    ----------
    grid : SurfaceGrid
        Full grid.
    selection : SelectionState
        Selection whose window bounds the result. It is normalized here as
        well, so unnormalized candidates are accepted.

    Returns
    -------
    SurfaceGrid
        Grid restricted to the rows/columns whose coordinates fall inside the
        window (inclusive). When an axis has no coordinate inside the window,
        the single index nearest to the window midpoint is kept instead, so
        the result always has at least one row and one column. Relative order
        of rows and columns is preserved.
    """
    clamped = normalize_selection(grid, selection)
    col_idx = _axis_indices(grid.col_coords, clamped.col_min, clamped.col_max)
    row_idx = _axis_indices(grid.row_coords, clamped.row_min, clamped.row_max)

    return SurfaceGrid(
        row_labels=tuple(grid.row_labels[i] for i in row_idx),
        col_labels=tuple(grid.col_labels[i] for i in col_idx),
        row_coords=grid.row_coords[row_idx],
        col_coords=grid.col_coords[col_idx],
        values=grid.values[np.ix_(row_idx, col_idx)],
    )
