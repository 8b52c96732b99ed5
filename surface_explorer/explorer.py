"""Notebook surface explorer: one 3D surface, two slices, two sliders.

Purpose
-------
``SurfaceExplorer`` wires the pure selection pipeline to Plotly widgets.
It owns no selection logic of its own: every gesture becomes a
:mod:`~surface_explorer.SelectionEvent` and goes through
:meth:`InteractionController.dispatch`.

Event sources
-------------
- Expiry chart (slice over rows at the focused column):
  x-axis zoom/pan sets the row window, autorange resets it, a point or tick
  label click focuses that row.
- Strike chart (slice over columns at the focused row): the same for the
  column axis.
- Double-click on either chart resets to the initial selection.
- The two sliders set both focus indices.

Examples
--------
>>> from surface_explorer import SurfaceExplorer
>>> explorer = SurfaceExplorer(title="<b>Vol surface</b>")  # doctest: +SKIP
>>> explorer  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from IPython.display import display

from .IndexSlider import IndexSlider
from .SelectionEvent import PointSelected, SelectionEvent, SelectionReset, SliderChanged, WindowChanged, WindowReset
from .controller import FocusWindowPolicy, InteractionController, SelectionChange
from .debouncing import QueuedDebouncer
from .explorer_layout import ExplorerLayout
from .plot_pane import PlotPane, PlotPaneStyle
from .rendering import PlotlyRenderer, build_data_preview_html, format_readout
from .selection import SelectionState, full_extent_selection
from .surface_grid import SurfaceGrid, generate_option_surface

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class ExplorerConfig:
    """Presentation and behaviour options for :class:`SurfaceExplorer`.

    Parameters
    ----------
    title : str
        HTML title in the header bar.
    col_title, row_title, value_title : str
        Axis titles for the column axis, row axis and values.
    column_slice_color, row_slice_color : str
        Line colours of the Expiry chart (slice at a column) and the Strike
        chart (slice at a row).
    colorscale : str
        Plotly colorscale of the surface.
    initial_col_index, initial_row_index : int
        Focus of the initial (and reset) selection.
    focus_policy : FocusWindowPolicy or str
        How slider/click focus changes interact with the window.
    relayout_throttle_ms : int or None
        When set, zoom/pan events are coalesced through a
        :class:`QueuedDebouncer` with this cadence. ``None`` applies every
        event immediately. Inside a Jupyter kernel ticks run on the kernel's
        asyncio loop; without a running loop they run on a timer thread.
    preview_rows, preview_cols : int
        Size of the data preview table.
    surface_height, slice_height : str
        CSS heights of the surface panel and of each slice pane.
    """

    title: str = ""
    col_title: str = "Strike"
    row_title: str = "Expiry"
    value_title: str = "Value (Z)"
    column_slice_color: str = "#38bdf8"
    row_slice_color: str = "#f97316"
    colorscale: str = "Viridis"
    initial_col_index: int = 3
    initial_row_index: int = 2
    focus_policy: FocusWindowPolicy = FocusWindowPolicy.INDEPENDENT
    relayout_throttle_ms: Optional[int] = None
    preview_rows: int = 4
    preview_cols: int = 5
    surface_height: str = "70vh"
    slice_height: str = "300px"

    def __post_init__(self) -> None:
        object.__setattr__(self, "focus_policy", FocusWindowPolicy(self.focus_policy))
        if self.relayout_throttle_ms is not None and self.relayout_throttle_ms <= 0:
            raise ValueError("relayout_throttle_ms must be > 0 or None")
        if self.preview_rows <= 0 or self.preview_cols <= 0:
            raise ValueError("preview_rows and preview_cols must be > 0")


class SurfaceExplorer:
    """Synchronized 3D surface + slice charts for one :class:`SurfaceGrid`.

    Parameters
    ----------
    grid : SurfaceGrid, optional
        Data to explore. Defaults to :func:`generate_option_surface`.
    config : ExplorerConfig, optional
        Base configuration.
    **overrides
        Field overrides applied on top of *config*
        (e.g. ``relayout_throttle_ms=200``).
    """

    def __init__(
        self,
        grid: Optional[SurfaceGrid] = None,
        config: Optional[ExplorerConfig] = None,
        **overrides: Any,
    ) -> None:
        self._grid = grid if grid is not None else generate_option_surface()
        self._config = replace(config or ExplorerConfig(), **overrides)
        cfg = self._config
        self._syncing_sliders = False

        # 1. Layout (View)
        self._layout = ExplorerLayout(cfg.title, surface_height=cfg.surface_height)

        # 2. Renderer + controller
        self._renderer = PlotlyRenderer(
            col_title=cfg.col_title,
            row_title=cfg.row_title,
            value_title=cfg.value_title,
            colorscale=cfg.colorscale,
            slice_colors={"column": cfg.column_slice_color, "row": cfg.row_slice_color},
        )
        initial = full_extent_selection(self._grid, cfg.initial_col_index, cfg.initial_row_index)
        self._controller = InteractionController(
            self._grid,
            self._renderer,
            initial=initial,
            focus_policy=cfg.focus_policy,
            column_axis_title=cfg.col_title,
            row_axis_title=cfg.row_title,
        )
        self._controller.render_initial()

        # 3. Panes
        pane_style = PlotPaneStyle(height=cfg.slice_height)
        self._surface_pane = PlotPane(
            self._controller.surface_handle,
            style=PlotPaneStyle(height="100%"),
        )
        self._column_slice_pane = PlotPane(
            self._controller.column_slice_handle,
            labels=self._grid.row_labels,
            style=pane_style,
        )
        self._row_slice_pane = PlotPane(
            self._controller.row_slice_handle,
            labels=self._grid.col_labels,
            style=pane_style,
        )

        # 4. Sliders
        current = self._controller.current
        self.col_slider = IndexSlider(self._grid.col_labels, value=current.col_index, description=cfg.col_title)
        self.row_slider = IndexSlider(self._grid.row_labels, value=current.row_index, description=cfg.row_title)

        self._layout.set_surface(self._surface_pane.widget)
        self._layout.set_slices(self._column_slice_pane.widget, self._row_slice_pane.widget)
        self._layout.set_sliders(self.col_slider, self.row_slider)
        self._layout.set_preview(build_data_preview_html(self._grid, cfg.preview_rows, cfg.preview_cols))
        self._layout.set_readout(format_readout(self._grid, current))

        # 5. Bind events
        self._relayout_debouncers: dict[str, QueuedDebouncer] = {}
        self._bind_slice_events(self._column_slice_pane, window_axis="row")
        self._bind_slice_events(self._row_slice_pane, window_axis="col")
        self.col_slider.observe(self._on_slider_change, names="value")
        self.row_slider.observe(self._on_slider_change, names="value")
        self._controller.observe(self._on_selection_change)

    # --- Properties ---

    @property
    def grid(self) -> SurfaceGrid:
        return self._grid

    @property
    def config(self) -> ExplorerConfig:
        return self._config

    @property
    def controller(self) -> InteractionController:
        return self._controller

    @property
    def selection(self) -> SelectionState:
        """Return the committed selection state."""
        return self._controller.current

    @property
    def layout(self) -> ExplorerLayout:
        return self._layout

    @property
    def widget(self) -> Any:
        """Return the root ipywidget."""
        return self._layout.widget

    @property
    def surface_figure(self) -> Any:
        return self._controller.surface_handle

    @property
    def column_slice_figure(self) -> Any:
        """The Expiry chart: values over rows at the focused column."""
        return self._controller.column_slice_handle

    @property
    def row_slice_figure(self) -> Any:
        """The Strike chart: values over columns at the focused row."""
        return self._controller.row_slice_handle

    # --- Public API ---

    def dispatch(self, event: SelectionEvent) -> SelectionChange:
        """Apply one interaction event."""
        return self._controller.dispatch(event)

    def reset(self) -> SelectionChange:
        """Return to the initial selection."""
        return self._controller.reset()

    def close(self) -> None:
        """Cancel pending throttled events and close the widget tree."""
        for debouncer in self._relayout_debouncers.values():
            debouncer.cancel()
        self._layout.widget.close()

    # --- Internal / Plumbing ---

    def _bind_slice_events(self, pane: PlotPane, *, window_axis: str) -> None:
        """Route zoom, click, tick-label and double-click events of one slice chart.

        The Expiry chart's x axis runs over rows, so its zoom drives the row
        window and its clicks focus a row; the Strike chart mirrors this for
        columns.
        """
        figw = pane.figure_widget
        index_field = "row_index" if window_axis == "row" else "col_index"

        def _select(index: int) -> None:
            self.dispatch(PointSelected(**{index_field: index}))

        def _on_click(_trace: Any, points: Any, _selector: Any) -> None:
            inds = list(getattr(points, "point_inds", []) or [])
            if inds:
                _select(inds[0])

        figw.data[0].on_click(_on_click)
        pane.on_label_click(_select)
        pane.on_reset(lambda: self.dispatch(SelectionReset()))

        def handler(*args: Any) -> None:
            self._handle_relayout(window_axis, *args)

        if self._config.relayout_throttle_ms is not None:
            debouncer = QueuedDebouncer(
                handler,
                execute_every_ms=self._config.relayout_throttle_ms,
                drop_overflow=True,
            )
            self._relayout_debouncers[window_axis] = debouncer
            handler = debouncer
        figw.layout.on_change(handler, "xaxis.range", "xaxis.autorange")

    def _handle_relayout(
        self,
        window_axis: str,
        _layout: Any = None,
        x_range: Optional[Sequence[Any]] = None,
        autorange: Any = None,
    ) -> None:
        """Translate one slice-chart relayout into a window event."""
        if autorange:
            self.dispatch(WindowReset(window_axis, raw=x_range))
            return
        if x_range is None or len(x_range) != 2:
            logger.debug("ignoring relayout on %s axis: range=%r", window_axis, x_range)
            return
        self.dispatch(WindowChanged(window_axis, x_range[0], x_range[1], raw=x_range))

    def _on_slider_change(self, _change: Any) -> None:
        if self._syncing_sliders:
            return
        self.dispatch(SliderChanged(self.col_slider.value, self.row_slider.value))

    def _on_selection_change(self, change: SelectionChange) -> None:
        current = change.current
        if change.focus_changed:
            self._syncing_sliders = True
            try:
                self.col_slider.value = current.col_index
                self.row_slider.value = current.row_index
            finally:
                self._syncing_sliders = False
            self._layout.set_readout(format_readout(self._grid, current))

    def _ipython_display_(self, **kwargs: Any) -> None:
        """
        Special method called by IPython to display the object.
        Uses IPython.display.display() to render the underlying widget.
        """
        display(self._layout.widget)
