"""Owned selection state and the single update pipeline.

Purpose
-------
``InteractionController`` is the only writer of the current
:class:`~surface_explorer.selection.SelectionState`. Every interaction source
calls :meth:`InteractionController.apply_candidate` (directly or through
:meth:`InteractionController.dispatch`), which

1. merges a partial update onto the current state,
2. normalizes the candidate against the grid,
3. commits it as the new current state, and
4. diffs it against the previous state to decide which views to refresh:
   a window change refreshes the 3D surface, a focus change refreshes both
   slices. The two checks are independent.

Architecture notes
------------------
Rendering is delegated to a :class:`SelectionRenderer` collaborator.
Exceptions raised by the renderer propagate to the caller unchanged; the
state has already been committed at that point. Observers registered with
:meth:`InteractionController.observe` are notified after rendering, and
their failures are logged and swallowed so one broken readout cannot stop
the interaction loop.

Logging
-------
Uses the standard ``logging`` module with a ``NullHandler``. Enable with::

    import logging
    logging.getLogger("surface_explorer.controller").setLevel(logging.DEBUG)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

from .SelectionEvent import PointSelected, SelectionEvent, SelectionReset, SliderChanged, event_to_update
from .selection import SelectionState, full_extent_selection, normalize_selection
from .slices import SliceData, slice_by_column, slice_by_row
from .surface_grid import SurfaceGrid
from .window import extract_window

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class FocusWindowPolicy(str, Enum):
    """How focus changes from sliders or clicks interact with the window.

    ``INDEPENDENT``
        Focus and window never affect each other.
    ``EXPAND_WINDOW``
        If a slider or click moves the focus to a coordinate outside the
        current window, that axis's window is reset to the full extent so the
        focused cross-section is visible in the 3D view.
    """

    INDEPENDENT = "independent"
    EXPAND_WINDOW = "expand_window"


class SelectionRenderer(Protocol):
    """Rendering collaborator driven by :class:`InteractionController`."""

    def render_surface(self, grid: SurfaceGrid, selection: SelectionState) -> Any:
        """Draw the 3D view for the first time and return a handle."""

    def update_surface(self, handle: Any, grid: SurfaceGrid, selection: SelectionState) -> None:
        """Redraw the 3D view behind *handle*."""

    def render_slice(self, slice_data: SliceData, axis_title: str) -> Any:
        """Draw one slice chart for the first time and return a handle."""

    def update_slice(self, handle: Any, slice_data: SliceData) -> None:
        """Redraw the slice chart behind *handle*."""


@dataclass(frozen=True)
class SelectionChange:
    """Result of one accepted candidate: previous and committed state."""

    previous: SelectionState
    current: SelectionState

    @property
    def window_changed(self) -> bool:
        return self.current.window_differs(self.previous)

    @property
    def focus_changed(self) -> bool:
        return self.current.focus_differs(self.previous)


ChangeCallback = Callable[[SelectionChange], Any]


class InteractionController:
    """Own the current selection and route changes to the renderer.

    Parameters
    ----------
    grid : SurfaceGrid
        Immutable grid all selections are normalized against.
    renderer : SelectionRenderer
        Collaborator that draws the 3D surface and the slices.
    initial : SelectionState, optional
        Start (and reset) state. Defaults to the full extent with focus
        ``(0, 0)``. It is normalized before use.
    focus_policy : FocusWindowPolicy, optional
        See :class:`FocusWindowPolicy`. Defaults to ``INDEPENDENT``.
    column_axis_title, row_axis_title : str
        Titles for the free axis of each slice chart. The column slice runs
        over rows, so it is titled with ``row_axis_title``.
    """

    def __init__(
        self,
        grid: SurfaceGrid,
        renderer: SelectionRenderer,
        *,
        initial: Optional[SelectionState] = None,
        focus_policy: FocusWindowPolicy = FocusWindowPolicy.INDEPENDENT,
        column_axis_title: str = "Strike",
        row_axis_title: str = "Expiry",
    ) -> None:
        self._grid = grid
        self._renderer = renderer
        self._focus_policy = FocusWindowPolicy(focus_policy)
        self._column_axis_title = column_axis_title
        self._row_axis_title = row_axis_title

        start = initial if initial is not None else full_extent_selection(grid)
        self._initial = normalize_selection(grid, start)
        self._current = self._initial

        self._surface_handle: Any = None
        self._column_slice_handle: Any = None
        self._row_slice_handle: Any = None
        self._observers: list[ChangeCallback] = []

    @property
    def grid(self) -> SurfaceGrid:
        return self._grid

    @property
    def current(self) -> SelectionState:
        """Return the committed selection state."""
        return self._current

    @property
    def initial(self) -> SelectionState:
        """Return the state :meth:`reset` returns to."""
        return self._initial

    @property
    def focus_policy(self) -> FocusWindowPolicy:
        return self._focus_policy

    @property
    def is_rendered(self) -> bool:
        return self._surface_handle is not None

    @property
    def surface_handle(self) -> Any:
        """Return the handle from ``render_surface`` (``None`` before rendering)."""
        return self._surface_handle

    @property
    def column_slice_handle(self) -> Any:
        """Return the handle of the slice over rows at the focused column."""
        return self._column_slice_handle

    @property
    def row_slice_handle(self) -> Any:
        """Return the handle of the slice over columns at the focused row."""
        return self._row_slice_handle

    def render_initial(self) -> None:
        """Draw all three views from the current state."""
        state = self._current
        self._surface_handle = self._renderer.render_surface(extract_window(self._grid, state), state)
        self._column_slice_handle = self._renderer.render_slice(
            slice_by_column(self._grid, state.col_index), self._row_axis_title
        )
        self._row_slice_handle = self._renderer.render_slice(
            slice_by_row(self._grid, state.row_index), self._column_axis_title
        )
        logger.info("initial render window=%s focus=%s", state.window, state.focus)

    def observe(self, callback: ChangeCallback) -> None:
        """Register *callback* to receive every :class:`SelectionChange`."""
        self._observers.append(callback)

    def unobserve(self, callback: ChangeCallback) -> None:
        """Remove a callback registered with :meth:`observe` if present."""
        if callback in self._observers:
            self._observers.remove(callback)

    def apply_candidate(self, partial_update: Mapping[str, Any]) -> SelectionChange:
        """Merge, normalize, commit, and refresh whatever changed.

        Parameters
        ----------
        partial_update : mapping
            Field name to new value, e.g. ``{"col_index": 4}``. An empty
            mapping is a no-op interaction.

        Returns
        -------
        SelectionChange

        Raises
        ------
        KeyError
            If *partial_update* names an unknown field.
        """
        previous = self._current
        candidate = previous.merged(partial_update)
        committed = normalize_selection(self._grid, candidate)
        self._current = committed

        change = SelectionChange(previous=previous, current=committed)
        logger.debug(
            "apply_candidate update=%s window_changed=%s focus_changed=%s",
            dict(partial_update),
            change.window_changed,
            change.focus_changed,
        )

        if self.is_rendered:
            if change.window_changed:
                self._renderer.update_surface(
                    self._surface_handle, extract_window(self._grid, committed), committed
                )
            if change.focus_changed:
                self._renderer.update_slice(
                    self._column_slice_handle, slice_by_column(self._grid, committed.col_index)
                )
                self._renderer.update_slice(
                    self._row_slice_handle, slice_by_row(self._grid, committed.row_index)
                )

        if change.window_changed or change.focus_changed:
            self._notify(change)
        return change

    def dispatch(self, event: SelectionEvent) -> SelectionChange:
        """Translate *event* into a partial update and apply it."""
        if isinstance(event, SelectionReset):
            return self.reset()
        update = event_to_update(event, self._grid)
        if isinstance(event, (PointSelected, SliderChanged)):
            update = self._apply_focus_policy(update)
        return self.apply_candidate(update)

    def reset(self) -> SelectionChange:
        """Return to the initial selection."""
        initial = self._initial
        return self.apply_candidate(
            {
                "col_min": initial.col_min,
                "col_max": initial.col_max,
                "row_min": initial.row_min,
                "row_max": initial.row_max,
                "col_index": initial.col_index,
                "row_index": initial.row_index,
            }
        )

    def _apply_focus_policy(self, update: dict[str, Any]) -> dict[str, Any]:
        if self._focus_policy is FocusWindowPolicy.INDEPENDENT:
            return update
        # Resolve the focus the update would produce, then widen any axis
        # whose window no longer contains it.
        target = normalize_selection(self._grid, self._current.merged(update))
        expanded = dict(update)
        col_coord = float(self._grid.col_coords[target.col_index])
        if not target.col_min <= col_coord <= target.col_max:
            expanded["col_min"], expanded["col_max"] = self._grid.col_extent
        row_coord = float(self._grid.row_coords[target.row_index])
        if not target.row_min <= row_coord <= target.row_max:
            expanded["row_min"], expanded["row_max"] = self._grid.row_extent
        return expanded

    def _notify(self, change: SelectionChange) -> None:
        for callback in list(self._observers):
            try:
                callback(change)
            except Exception:
                logger.exception("selection observer %r failed", callback)
