"""
plot_pane.py: Styled Plotly pane with tick-label click and double-click reporting

Plotly's ``FigureWidget`` forwards point clicks to Python (``trace.on_click``)
but not clicks on axis tick labels nor double-clicks on the plot background.
The slice charts need both: clicking the ``"6M"`` tick on the expiry chart
focuses that expiry, and double-clicking anywhere resets the selection.

Public API
----------

- `AxisLabelClickDriver`
    A hidden `anywidget.AnyWidget`. Its frontend JavaScript listens, in the
    capture phase, for ``mousedown`` and ``dblclick`` events on its DOM
    parent (the pane host), resolves tick text to an index in `labels`, and
    syncs counters back to Python.

- `PlotPaneStyle`
    Frozen dataclass of visual options for the wrapper box.

- `PlotPane`
    Python wrapper that assembles a host box ``[figure_widget, driver]`` and
    a styled outer box. Exposes `.widget` for embedding and callback
    registration helpers.

Key contract
------------
The driver must be a sibling of the Plotly widget inside the same host box;
it uses ``el.parentElement`` as the element to listen on.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import anywidget
import ipywidgets as W
import traitlets


class AxisLabelClickDriver(anywidget.AnyWidget):
    """
    Frontend listener for tick-label clicks and double-clicks.

    Traitlets (synced to frontend)
    ------------------------------

    labels:
        Tick labels of the clickable axis. A click on a tick whose text equals
        ``labels[i]`` reports index ``i``.

    clicked_index:
        Index of the most recently clicked label (``-1`` before any click).

    click_count:
        Incremented on every resolved label click, so that clicking the same
        label twice still produces a change notification.

    reset_count:
        Incremented on every double-click that does not land on a data point.

    debug_js:
        Enable frontend console logs.
    """

    labels = traitlets.List(traitlets.Unicode(), default_value=[]).tag(sync=True)
    clicked_index = traitlets.Int(-1).tag(sync=True)
    click_count = traitlets.Int(0).tag(sync=True)
    reset_count = traitlets.Int(0).tag(sync=True)
    debug_js = traitlets.Bool(False).tag(sync=True)

    _esm = r"""
    function log(model, ...args) {
      if (model.get("debug_js")) console.log("[AxisLabelClickDriver]", ...args);
    }

    function tickText(target) {
      if (!target) return "";
      const tag = (target.tagName || "").toLowerCase();
      if (tag === "text" || tag === "tspan") {
        return (target.textContent || "").trim();
      }
      const tick = target.closest ? target.closest(".xtick, .ytick") : null;
      if (tick) {
        const textEl = tick.querySelector("text");
        return textEl ? (textEl.textContent || "").trim() : "";
      }
      return "";
    }

    export default {
      render({ model, el }) {
        el.style.display = "none";
        const host = el.parentElement;
        if (!host) return;

        const onMouseDown = (event) => {
          const text = tickText(event.target);
          if (!text) return;
          const index = model.get("labels").indexOf(text);
          log(model, "mousedown", text, index);
          if (index === -1) return;
          model.set("clicked_index", index);
          model.set("click_count", model.get("click_count") + 1);
          model.save_changes();
        };

        const onDoubleClick = (event) => {
          const target = event.target;
          if (target && target.classList && target.classList.contains("point")) return;
          log(model, "dblclick");
          model.set("reset_count", model.get("reset_count") + 1);
          model.save_changes();
        };

        host.addEventListener("mousedown", onMouseDown, true);
        host.addEventListener("dblclick", onDoubleClick, true);

        return () => {
          host.removeEventListener("mousedown", onMouseDown, true);
          host.removeEventListener("dblclick", onDoubleClick, true);
        };
      }
    };
    """

    def on_label_click(self, callback: Callable[[int], Any]) -> None:
        """Call ``callback(index)`` after every resolved label click."""

        def _handler(_change: dict[str, Any]) -> None:
            callback(self.clicked_index)

        self.observe(_handler, names="click_count")

    def on_reset(self, callback: Callable[[], Any]) -> None:
        """Call ``callback()`` after every background double-click."""

        def _handler(_change: dict[str, Any]) -> None:
            callback()

        self.observe(_handler, names="reset_count")


@dataclass(frozen=True)
class PlotPaneStyle:
    """
    Visual styling options for `PlotPane`.

    Parameters
    ----------
    height:
        CSS height of the pane (the Plotly widget fills it).
    padding_px:
        Inner padding in pixels.
    border:
        CSS border string.
    border_radius_px:
        Corner radius in pixels.
    """

    height: str = "360px"
    padding_px: int = 0
    border: str = "1px solid #2b3245"
    border_radius_px: int = 8


class PlotPane:
    """
    Styled host for one Plotly `FigureWidget` plus its click driver.

    Parameters
    ----------
    figw:
        The widget rendering the Plotly figure.
    labels:
        Tick labels that should be clickable. Empty disables label clicks.
    style:
        `PlotPaneStyle` for the outer wrapper.
    debug_js:
        Enable frontend console logs.
    """

    def __init__(
        self,
        figw: W.Widget,
        *,
        labels: Sequence[str] = (),
        style: PlotPaneStyle = PlotPaneStyle(),
        debug_js: bool = False,
    ) -> None:
        self.figure_widget = figw
        self.driver = AxisLabelClickDriver(labels=[str(label) for label in labels], debug_js=debug_js)

        self._host = W.Box(
            [figw, self.driver],
            layout=W.Layout(
                width="100%",
                height="100%",
                min_width="0",
                min_height="0",
                display="flex",
                flex_flow="column",
                overflow="hidden",
            ),
        )
        self._wrap = W.Box(
            [self._host],
            layout=W.Layout(
                width="100%",
                height=style.height,
                min_width="0",
                padding=f"{int(style.padding_px)}px",
                border=style.border,
                border_radius=f"{int(style.border_radius_px)}px",
                overflow="hidden",
                box_sizing="border-box",
            ),
        )

    @property
    def widget(self) -> W.Widget:
        """The widget to embed in an outer ipywidgets layout."""
        return self._wrap

    def on_label_click(self, callback: Callable[[int], Any]) -> None:
        self.driver.on_label_click(callback)

    def on_reset(self, callback: Callable[[], Any]) -> None:
        self.driver.on_reset(callback)
