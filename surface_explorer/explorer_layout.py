"""Explorer layout primitives.

This module builds the notebook widget tree used by
:class:`~surface_explorer.explorer.SurfaceExplorer`: a title bar, the 3D
surface pane on the left, and a right-hand column with the two slice panes,
the focus sliders, the selection readout and a small data preview table.
"""

from __future__ import annotations

import ipywidgets as widgets

# =============================================================================
# SECTION: ExplorerLayout (The View) [id: ExplorerLayout]
# =============================================================================


class ExplorerLayout:
    """
    Manages the visual structure and widget hierarchy of a SurfaceExplorer.

    This class isolates the VBox/HBox nesting and CSS layout strings from the
    selection logic.

    Responsibilities:
    - Building the HBox/VBox structure.
    - Providing containers for the surface pane, slice panes and sliders.
    - Showing the selection readout and data preview.
    """

    def __init__(self, title: str = "", *, surface_height: str = "70vh") -> None:
        """Initialize the layout manager and build the widget tree.

        Parameters
        ----------
        title : str, optional
            Title text (rendered as HTML) in the header.
        surface_height : str, optional
            CSS height of the surface panel.
        """
        # 1. Title Bar
        self.title_html = widgets.HTML(value=title, layout=widgets.Layout(margin="0px"))
        self.readout_html = widgets.HTML(value="", layout=widgets.Layout(margin="0px"))
        self._titlebar = widgets.HBox(
            [self.title_html, self.readout_html],
            layout=widgets.Layout(
                width="100%",
                align_items="center",
                justify_content="space-between",
                margin="0 0 6px 0",
            ),
        )

        # 2. Surface Area (The "Left" Panel)
        #    Ensure a real pixel height for Plotly sizing.
        self.surface_container = widgets.Box(
            children=(),
            layout=widgets.Layout(
                width="100%",
                height=surface_height,
                min_width="320px",
                min_height="260px",
                margin="0px",
                padding="0px",
                flex="1 1 560px",
            ),
        )

        # 3. Slices + controls (The "Right" Panel)
        self.slices_box = widgets.VBox(
            layout=widgets.Layout(width="100%", gap="8px"),
        )
        self.sliders_header = widgets.HTML("<b>Cross-sections</b>", layout=widgets.Layout(margin="6px 0 0 0"))
        self.sliders_box = widgets.VBox(
            layout=widgets.Layout(
                width="100%",
                padding="8px",
                border="1px solid rgba(15,23,42,0.08)",
                border_radius="10px",
            )
        )
        self.preview_header = widgets.HTML("<b>Data preview</b>", layout=widgets.Layout(margin="10px 0 0 0"))
        self.preview_html = widgets.HTML(value="", layout=widgets.Layout(width="100%"))

        self.sidebar_container = widgets.VBox(
            [
                self.slices_box,
                self.sliders_header,
                self.sliders_box,
                self.preview_header,
                self.preview_html,
            ],
            layout=widgets.Layout(
                margin="0px",
                padding="0px 0px 0px 10px",
                flex="0 1 480px",
                min_width="320px",
            ),
        )

        self._content = widgets.HBox(
            [self.surface_container, self.sidebar_container],
            layout=widgets.Layout(width="100%", align_items="flex-start", flex_flow="row wrap"),
        )
        self.root_widget = widgets.VBox(
            [self._titlebar, self._content],
            layout=widgets.Layout(width="100%"),
        )

    @property
    def widget(self) -> widgets.Widget:
        """Return the root widget to display."""
        return self.root_widget

    def set_title(self, text: str) -> None:
        self.title_html.value = text

    def get_title(self) -> str:
        return self.title_html.value

    def set_readout(self, text: str) -> None:
        self.readout_html.value = text

    def set_preview(self, html_table: str) -> None:
        self.preview_html.value = html_table

    def set_surface(self, widget: widgets.Widget) -> None:
        """Place the surface pane widget in the left panel."""
        self.surface_container.children = (widget,)

    def set_slices(self, *panes: widgets.Widget) -> None:
        """Place the slice pane widgets, top to bottom."""
        self.slices_box.children = tuple(panes)

    def set_sliders(self, *sliders: widgets.Widget) -> None:
        self.sliders_box.children = tuple(sliders)
