"""Selection state and its normalization against a :class:`SurfaceGrid`.

A ``SelectionState`` carries two independent things:

- the *window*, a coordinate rectangle bounding the 3D view, and
- the *focus*, one index per axis selecting the row/column that the two 1D
  slice charts show.

Candidate states produced by user input may be inverted, out of range or
fractional. :func:`normalize_selection` repairs any candidate so that the
window is ordered and inside the grid extent and the focus indices are valid
integers. It never raises.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from numbers import Integral
from typing import Any

from .surface_grid import SurfaceGrid

WINDOW_FIELDS = ("col_min", "col_max", "row_min", "row_max")
FOCUS_FIELDS = ("col_index", "row_index")


@dataclass(frozen=True)
class SelectionState:
    """Window bounds plus focus indices.

    Parameters
    ----------
    col_min, col_max : float
        Requested window on the column coordinate axis.
    row_min, row_max : float
        Requested window on the row coordinate axis.
    col_index, row_index : int
        Focused cross-section indices (0-based). Candidate states may carry
        floats here; normalization rounds them.

    Notes
    -----
    Instances are immutable. Use :meth:`replace` or :meth:`merged` to derive a
    candidate; the ordering/range invariants hold only after
    :func:`normalize_selection`.
    """

    col_min: float
    col_max: float
    row_min: float
    row_max: float
    col_index: int = 0
    row_index: int = 0

    @property
    def window(self) -> tuple[float, float, float, float]:
        """Return ``(col_min, col_max, row_min, row_max)``."""
        return (self.col_min, self.col_max, self.row_min, self.row_max)

    @property
    def focus(self) -> tuple[int, int]:
        """Return ``(col_index, row_index)``."""
        return (self.col_index, self.row_index)

    def replace(self, **changes: Any) -> "SelectionState":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def merged(self, update: Mapping[str, Any]) -> "SelectionState":
        """Return a copy with a partial update applied.

        Raises
        ------
        KeyError
            If *update* names a field that ``SelectionState`` does not have.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(update) - known)
        if unknown:
            raise KeyError(f"Unknown selection field(s): {', '.join(unknown)}")
        return replace(self, **dict(update))

    def window_differs(self, other: "SelectionState") -> bool:
        """Return True when any window bound differs from *other*."""
        return self.window != other.window

    def focus_differs(self, other: "SelectionState") -> bool:
        """Return True when either focus index differs from *other*."""
        return self.focus != other.focus


def full_extent_selection(
    grid: SurfaceGrid, col_index: int = 0, row_index: int = 0
) -> SelectionState:
    """Return the normalized "whole grid" selection with the given focus."""
    col_lo, col_hi = grid.col_extent
    row_lo, row_hi = grid.row_extent
    return normalize_selection(
        grid,
        SelectionState(
            col_min=col_lo,
            col_max=col_hi,
            row_min=row_lo,
            row_max=row_hi,
            col_index=col_index,
            row_index=row_index,
        ),
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    value = float(value)
    floor = math.floor(value)
    return floor + 1 if value - floor >= 0.5 else floor


def clamp_index(index: float, length: int) -> int:
    """Round *index* and clamp it into ``[0, length - 1]``.

    NaN resolves to ``0``; infinities clamp to the nearest end. Integers are
    clamped exactly, so ones too large for a float are still accepted.
    """
    upper = max(int(length) - 1, 0)
    if isinstance(index, Integral):
        return min(max(int(index), 0), upper)
    value = float(index)
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return upper if value > 0 else 0
    return min(max(round_half_up(value), 0), upper)


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def _bound(value: float, lo: float, hi: float) -> float:
    # Integers are compared exactly against the extent before the float cast.
    if isinstance(value, Integral):
        return float(_clamp(int(value), lo, hi))
    value = float(value)
    return value if math.isnan(value) else _clamp(value, lo, hi)


def _normalize_bounds(a: float, b: float, extent: tuple[float, float]) -> tuple[float, float]:
    lo, hi = extent
    a = _bound(a, lo, hi)
    b = _bound(b, lo, hi)
    # NaN cannot be ordered; treat it as "no constraint" on that end.
    if math.isnan(a):
        a = lo
    if math.isnan(b):
        b = hi
    return min(a, b), max(a, b)


def normalize_selection(grid: SurfaceGrid, candidate: SelectionState) -> SelectionState:
    """Repair *candidate* so it is valid against *grid*.

    Per axis the window pair is reordered and both ends are clamped into the
    grid extent. Focus indices are rounded and clamped into the valid index
    range. A collapsed window (``min == max``) is kept as is.

    The function is total and idempotent:
    ``normalize_selection(g, normalize_selection(g, s)) == normalize_selection(g, s)``.
    """
    col_min, col_max = _normalize_bounds(candidate.col_min, candidate.col_max, grid.col_extent)
    row_min, row_max = _normalize_bounds(candidate.row_min, candidate.row_max, grid.row_extent)
    rows, cols = grid.shape
    return SelectionState(
        col_min=col_min,
        col_max=col_max,
        row_min=row_min,
        row_max=row_max,
        col_index=clamp_index(candidate.col_index, cols),
        row_index=clamp_index(candidate.row_index, rows),
    )
