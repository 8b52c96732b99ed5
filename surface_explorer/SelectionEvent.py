"""Standardized interaction event payloads.

Every user gesture the explorer listens to (zoom/pan on a slice chart,
autorange reset, point or tick-label click, slider drag, double-click reset)
is turned into one of the immutable events below before it reaches
:class:`~surface_explorer.controller.InteractionController`. The controller
then translates the event into a partial selection update with
:func:`event_to_update`, so every source goes through the same
merge-normalize-diff pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from .input_convert import InputConvert
from .surface_grid import SurfaceGrid

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

AXES = ("col", "row")


def _require_axis(axis: str) -> str:
    if axis not in AXES:
        raise ValueError(f"axis must be one of {AXES}, got {axis!r}")
    return axis


@dataclass(frozen=True)
class WindowChanged:
    """The visible range of one axis changed (zoom or pan).

    Parameters
    ----------
    axis : str
        ``"col"`` or ``"row"``.
    lo, hi : Any
        New bounds, in any order. Plotly relayout payloads may deliver them as
        strings, so they are converted lazily.
    raw : Any, optional
        Raw frontend payload, for debugging only.
    """

    axis: str
    lo: Any
    hi: Any
    raw: Any = None

    def __post_init__(self) -> None:
        _require_axis(self.axis)


@dataclass(frozen=True)
class WindowReset:
    """One axis asked for its full extent back (Plotly autorange)."""

    axis: str
    raw: Any = None

    def __post_init__(self) -> None:
        _require_axis(self.axis)


@dataclass(frozen=True)
class PointSelected:
    """A point or tick label was clicked; either index may be omitted."""

    col_index: Optional[float] = None
    row_index: Optional[float] = None
    raw: Any = None


@dataclass(frozen=True)
class SliderChanged:
    """The focus sliders moved."""

    col_index: float
    row_index: float
    raw: Any = None


@dataclass(frozen=True)
class SelectionReset:
    """Double-click: return to the initial selection."""

    raw: Any = None


SelectionEvent = Union[WindowChanged, WindowReset, PointSelected, SliderChanged, SelectionReset]


def event_to_update(event: SelectionEvent, grid: SurfaceGrid) -> dict[str, Any]:
    """Translate *event* into a partial :class:`SelectionState` update.

    ``SelectionReset`` has no partial form (it needs the controller's initial
    state) and yields an empty mapping; :meth:`InteractionController.dispatch`
    handles it directly.

    Window bounds that cannot be parsed drop the event: the result is an empty
    update and the failure is logged at DEBUG level.
    """
    if isinstance(event, WindowChanged):
        try:
            lo = InputConvert(event.lo)
            hi = InputConvert(event.hi)
        except ValueError:
            logger.debug("dropping unparseable window event %r", event)
            return {}
        return {f"{event.axis}_min": lo, f"{event.axis}_max": hi}

    if isinstance(event, WindowReset):
        lo, hi = grid.col_extent if event.axis == "col" else grid.row_extent
        return {f"{event.axis}_min": lo, f"{event.axis}_max": hi}

    if isinstance(event, PointSelected):
        update: dict[str, Any] = {}
        if event.col_index is not None:
            update["col_index"] = event.col_index
        if event.row_index is not None:
            update["row_index"] = event.row_index
        return update

    if isinstance(event, SliderChanged):
        return {"col_index": event.col_index, "row_index": event.row_index}

    if isinstance(event, SelectionReset):
        return {}

    raise TypeError(f"Unsupported selection event: {type(event).__name__}")
