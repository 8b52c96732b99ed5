import ipywidgets as widgets
import traitlets

from .input_convert import resolve_axis_position
from .selection import clamp_index


class IndexSlider(widgets.VBox):
    """
    An integer slider over the labels of one grid axis, with:
      - a *single editable text field* showing the current label; it accepts a
        label (``"6M"``) or an index expression (``"2+1"``),
      - a reset button returning to the initial index.

    Design notes
    ------------
    - The slider's built-in readout is disabled; the text field shows the
      label, which is what the user reads on the charts.
    - The Text field commits on Enter (continuous_update=False).
    - If parsing fails, the Text field reverts to the current label.
    - Fractional or out-of-range input is rounded and clamped like any other
      focus index.
    """

    value = traitlets.Int(0)

    def __init__(self, labels, value=0, description="Index:", **kwargs):
        self._labels = tuple(str(label) for label in labels)
        self._default = int(value)

        # Internal guard to prevent circular updates (slider -> text -> slider -> ...)
        self._syncing = False

        self.slider = widgets.IntSlider(
            value=self._default,
            min=0,
            max=len(self._labels) - 1,
            step=1,
            description="",
            continuous_update=True,
            readout=False,
            layout=widgets.Layout(width="60%"),
        )
        self.description_label = widgets.HTML(
            value=description,
            layout=widgets.Layout(width="70px"),
        )
        self.text = widgets.Text(
            value=self._labels[self._default],
            continuous_update=False,
            layout=widgets.Layout(width="70px"),
        )
        self.btn_reset = widgets.Button(
            description="↺",
            tooltip="Reset",
            layout=widgets.Layout(width="22px", height="22px", padding="0px"),
        )

        top_row = widgets.HBox(
            [self.description_label, self.slider, self.text, self.btn_reset],
            layout=widgets.Layout(align_items="center", gap="4px"),
        )
        super().__init__([top_row], **kwargs)

        traitlets.link((self, "value"), (self.slider, "value"))
        self.slider.observe(self._sync_text_from_slider, names="value")
        self.text.observe(self._commit_text_value, names="value")
        self.btn_reset.on_click(self._reset)

        self.value = self._default
        self._sync_text(self.value)

    @property
    def labels(self):
        return self._labels

    @property
    def label(self):
        """Return the label at the current index."""
        return self._labels[self.value]

    def _sync_text(self, index):
        """Set the text field from an index, without triggering parse logic."""
        self._syncing = True
        try:
            self.text.value = self._labels[index]
        finally:
            self._syncing = False

    def _sync_text_from_slider(self, change):
        if self._syncing:
            return
        self._sync_text(change.new)

    def _commit_text_value(self, change):
        """
        When the user commits text (Enter / blur):
          - resolve it to an index (label match first, then expression),
          - round and clamp to the slider range,
          - update self.value and normalize the displayed text.

        On any error, revert to the current label.
        """
        if self._syncing:
            return
        try:
            position = resolve_axis_position((change.new or "").strip(), self._labels)
            self.value = clamp_index(position, len(self._labels))
            self._sync_text(self.value)
        except ValueError:
            self._sync_text(self.value)

    def _reset(self, _):
        self.value = self._default
