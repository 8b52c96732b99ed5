"""Top-level public API for the ``surface_explorer`` package.

This module re-exports the notebook-facing explorer and the pure selection
pipeline so users can import from a single namespace, for example:

>>> from surface_explorer import SurfaceExplorer, generate_option_surface  # doctest: +SKIP

The pure functions (``normalize_selection``, ``extract_window``,
``slice_by_column``, ``slice_by_row``) do not depend on any widget library
and can be used on their own.
"""

from .SelectionEvent import (
    PointSelected,
    SelectionEvent,
    SelectionReset,
    SliderChanged,
    WindowChanged,
    WindowReset,
    event_to_update,
)
from .controller import FocusWindowPolicy, InteractionController, SelectionChange, SelectionRenderer
from .explorer import ExplorerConfig, SurfaceExplorer
from .selection import SelectionState, clamp_index, full_extent_selection, normalize_selection
from .slices import SliceData, slice_by_column, slice_by_row
from .surface_grid import (
    EXPIRY_LABELS,
    STRIKE_LABELS,
    SurfaceGrid,
    build_grid,
    generate_option_surface,
)
from .window import extract_window, nearest_index

__all__ = [
    "EXPIRY_LABELS",
    "STRIKE_LABELS",
    "ExplorerConfig",
    "FocusWindowPolicy",
    "InteractionController",
    "PointSelected",
    "SelectionChange",
    "SelectionEvent",
    "SelectionRenderer",
    "SelectionReset",
    "SelectionState",
    "SliceData",
    "SliderChanged",
    "SurfaceExplorer",
    "SurfaceGrid",
    "WindowChanged",
    "WindowReset",
    "build_grid",
    "clamp_index",
    "event_to_update",
    "extract_window",
    "full_extent_selection",
    "generate_option_surface",
    "nearest_index",
    "normalize_selection",
    "slice_by_column",
    "slice_by_row",
]
