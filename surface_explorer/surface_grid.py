"""Immutable surface grid model used by :mod:`surface_explorer`.

Purpose
-------
Defines ``SurfaceGrid``, the rectangular dataset every other module reads:
two ordered label sequences, two strictly increasing coordinate sequences,
and a matrix of scalar values indexed by ``(row, column)``.

Concepts and structure
----------------------
- Columns are strikes, rows are expiries in the default option-surface
  example, but nothing in this module depends on that interpretation.
- Coordinates default to ``0..N-1``. Callers may pass any strictly increasing
  sequence; downstream code only relies on monotonic increase.
- All arrays are copied on construction and marked read-only, so a grid can
  be shared freely between the controller and the renderers.

Examples
--------
>>> from surface_explorer.surface_grid import generate_option_surface
>>> grid = generate_option_surface()
>>> grid.shape
(6, 9)
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np

STRIKE_LABELS: tuple[str, ...] = (
    "80",
    "85",
    "90",
    "95",
    "100",
    "105",
    "110",
    "115",
    "120",
)

EXPIRY_LABELS: tuple[str, ...] = ("1M", "2M", "3M", "6M", "1Y", "2Y")

ValueFunction = Callable[[int, int], float]


def _frozen_array(values: Sequence[float] | np.ndarray, *, ndim: int, name: str) -> np.ndarray:
    """Return a read-only float copy of *values* with the expected rank."""
    arr = np.array(values, dtype=float, copy=True)
    if arr.ndim != ndim:
        raise ValueError(f"{name} must be {ndim}-dimensional, got shape {arr.shape}")
    arr.flags.writeable = False
    return arr


def _require_increasing(coords: np.ndarray, name: str) -> None:
    if coords.size > 1 and not np.all(np.diff(coords) > 0):
        raise ValueError(f"{name} must be strictly increasing")


@dataclass(frozen=True, eq=False)
class SurfaceGrid:
    """Rectangular grid of scalar values over two labelled axes.

    Parameters
    ----------
    row_labels : tuple[str, ...]
        Human-readable labels of the rows (size ``R``).
    col_labels : tuple[str, ...]
        Human-readable labels of the columns (size ``C``).
    row_coords : numpy.ndarray
        Strictly increasing numeric positions of the rows.
    col_coords : numpy.ndarray
        Strictly increasing numeric positions of the columns.
    values : numpy.ndarray
        Matrix of shape ``(R, C)``; ``values[r, c]`` is the value at
        ``(col_coords[c], row_coords[r])``.

    Raises
    ------
    ValueError
        If an axis is empty, shapes disagree, or coordinates are not strictly
        increasing.
    """

    row_labels: tuple[str, ...]
    col_labels: tuple[str, ...]
    row_coords: np.ndarray
    col_coords: np.ndarray
    values: np.ndarray

    def __post_init__(self) -> None:
        row_labels = tuple(str(label) for label in self.row_labels)
        col_labels = tuple(str(label) for label in self.col_labels)
        row_coords = _frozen_array(self.row_coords, ndim=1, name="row_coords")
        col_coords = _frozen_array(self.col_coords, ndim=1, name="col_coords")
        values = _frozen_array(self.values, ndim=2, name="values")

        if not row_labels or not col_labels:
            raise ValueError("SurfaceGrid requires at least one row and one column")
        if len(row_labels) != row_coords.size:
            raise ValueError(
                f"row_labels ({len(row_labels)}) and row_coords ({row_coords.size}) differ in length"
            )
        if len(col_labels) != col_coords.size:
            raise ValueError(
                f"col_labels ({len(col_labels)}) and col_coords ({col_coords.size}) differ in length"
            )
        if values.shape != (len(row_labels), len(col_labels)):
            raise ValueError(
                f"values has shape {values.shape}, expected {(len(row_labels), len(col_labels))}"
            )
        _require_increasing(row_coords, "row_coords")
        _require_increasing(col_coords, "col_coords")

        # Frozen dataclass: assign the normalized copies through object.__setattr__.
        object.__setattr__(self, "row_labels", row_labels)
        object.__setattr__(self, "col_labels", col_labels)
        object.__setattr__(self, "row_coords", row_coords)
        object.__setattr__(self, "col_coords", col_coords)
        object.__setattr__(self, "values", values)

    @property
    def shape(self) -> tuple[int, int]:
        """Return ``(rows, columns)``."""
        return (len(self.row_labels), len(self.col_labels))

    @property
    def row_extent(self) -> tuple[float, float]:
        """Return the ``(lo, hi)`` coordinate extent of the row axis."""
        first, last = float(self.row_coords[0]), float(self.row_coords[-1])
        return (min(first, last), max(first, last))

    @property
    def col_extent(self) -> tuple[float, float]:
        """Return the ``(lo, hi)`` coordinate extent of the column axis."""
        first, last = float(self.col_coords[0]), float(self.col_coords[-1])
        return (min(first, last), max(first, last))

    def to_nested_lists(self) -> list[list[float]]:
        """Return ``values`` as plain nested lists (row-major)."""
        return self.values.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SurfaceGrid):
            return NotImplemented
        return (
            self.row_labels == other.row_labels
            and self.col_labels == other.col_labels
            and np.array_equal(self.row_coords, other.row_coords)
            and np.array_equal(self.col_coords, other.col_coords)
            and np.array_equal(self.values, other.values)
        )

    def __repr__(self) -> str:
        rows, cols = self.shape
        return f"SurfaceGrid(rows={rows}, cols={cols})"


def build_grid(
    row_labels: Sequence[str],
    col_labels: Sequence[str],
    value_fn: ValueFunction,
    *,
    row_coords: Optional[Sequence[float]] = None,
    col_coords: Optional[Sequence[float]] = None,
) -> SurfaceGrid:
    """Materialize a :class:`SurfaceGrid` from labels and a value function.

    Parameters
    ----------
    row_labels, col_labels : sequence[str]
        Ordered, non-empty axis labels.
    value_fn : callable
        ``value_fn(col_index, row_index) -> float``, called once per cell.
    row_coords, col_coords : sequence[float], optional
        Axis coordinates. Default to ``0..N-1``.

    Returns
    -------
    SurfaceGrid
    """
    rows = len(row_labels)
    cols = len(col_labels)
    values = [[float(value_fn(c, r)) for c in range(cols)] for r in range(rows)]
    return SurfaceGrid(
        row_labels=tuple(row_labels),
        col_labels=tuple(col_labels),
        row_coords=np.arange(rows, dtype=float) if row_coords is None else row_coords,
        col_coords=np.arange(cols, dtype=float) if col_coords is None else col_coords,
        values=np.array(values, dtype=float).reshape(rows, cols),
    )


def option_surface_value(col_index: int, row_index: int, cols: int, rows: int) -> float:
    """Illustrative smile/term-structure value at one grid cell."""
    strike_factor = col_index / cols
    expiry_factor = row_index / rows
    return (
        0.3
        + 0.2 * math.sin(strike_factor * math.pi * 2) * math.cos(expiry_factor * math.pi)
        + 0.15 * expiry_factor
        - 0.1 * strike_factor
    )


def generate_option_surface(
    strikes: Sequence[str] = STRIKE_LABELS,
    expiries: Sequence[str] = EXPIRY_LABELS,
) -> SurfaceGrid:
    """Build the demo option surface: strikes as columns, expiries as rows."""
    cols, rows = len(strikes), len(expiries)
    return build_grid(
        expiries,
        strikes,
        lambda c, r: option_surface_value(c, r, cols, rows),
    )
