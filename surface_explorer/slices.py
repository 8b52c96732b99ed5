"""1D cross-sections ("slices") of a :class:`SurfaceGrid`.

Slices always span the full free axis; only the 3D surface is windowed.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .selection import clamp_index
from .surface_grid import SurfaceGrid


def _read_only(values: np.ndarray) -> np.ndarray:
    out = np.array(values, dtype=float, copy=True)
    out.flags.writeable = False
    return out


@dataclass(frozen=True, eq=False)
class SliceData:
    """One cross-section of a grid along a fixed index.

    Parameters
    ----------
    axis_coords : numpy.ndarray
        Coordinates of the free axis (full length).
    axis_labels : tuple[str, ...]
        Labels of the free axis.
    values : numpy.ndarray
        Slice values, same length as ``axis_coords``.
    fixed_index : int
        Resolved (rounded and clamped) index on the fixed axis.
    fixed_label : str
        Label at ``fixed_index`` on the fixed axis.
    fixed_axis : str
        ``"column"`` for :func:`slice_by_column`, ``"row"`` for
        :func:`slice_by_row`.
    """

    axis_coords: np.ndarray
    axis_labels: tuple[str, ...]
    values: np.ndarray
    fixed_index: int
    fixed_label: str
    fixed_axis: str

    def __len__(self) -> int:
        return len(self.values)


def slice_by_column(grid: SurfaceGrid, col_index: float) -> SliceData:
    """Return the column at *col_index* as a slice over the rows.

    *col_index* is rounded and clamped, so any number is accepted.

    Examples
    --------
    >>> from surface_explorer.surface_grid import generate_option_surface
    >>> slice_by_column(generate_option_surface(), 3.6).fixed_index
    4
    """
    _, cols = grid.shape
    index = clamp_index(col_index, cols)
    return SliceData(
        axis_coords=_read_only(grid.row_coords),
        axis_labels=grid.row_labels,
        values=_read_only(grid.values[:, index]),
        fixed_index=index,
        fixed_label=grid.col_labels[index],
        fixed_axis="column",
    )


def slice_by_row(grid: SurfaceGrid, row_index: float) -> SliceData:
    """Return the row at *row_index* as a slice over the columns."""
    rows, _ = grid.shape
    index = clamp_index(row_index, rows)
    return SliceData(
        axis_coords=_read_only(grid.col_coords),
        axis_labels=grid.col_labels,
        values=_read_only(grid.values[index, :]),
        fixed_index=index,
        fixed_label=grid.row_labels[index],
        fixed_axis="row",
    )
