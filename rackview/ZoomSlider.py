import ipywidgets as widgets
import traitlets

from .input_convert import parse_real
from .subscriptions import Subscription
from .viewport import DEFAULT_ZOOM, ZOOM_MAX, ZOOM_MIN


class ZoomSlider(widgets.HBox):
    """
    Zoom control: a FloatSlider plus one editable numeric field and a reset button.

    Design notes
    ------------
    - The slider's built-in readout is disabled, so there is only one number field.
    - The Text field commits on Enter (continuous_update=False) and accepts
      expressions such as "15/2" via `parse_real`.
    - Typed values are clamped to [min, max]; if parsing fails the field reverts
      to the previous committed value.
    - Smaller values zoom in, larger values show more of the floor.
    """

    value = traitlets.Float(DEFAULT_ZOOM)

    def __init__(
        self,
        value=DEFAULT_ZOOM,
        min=ZOOM_MIN,
        max=ZOOM_MAX,
        step=0.1,
        description="Zoom:",
        **kwargs,
    ):
        if not min < max:
            raise ValueError(f"ZoomSlider needs min < max, got min={min!r}, max={max!r}")
        # Builtin min/max are shadowed by the arguments here.
        value = min if value < min else max if value > max else value
        self._default = value

        # Internal guard to prevent circular updates (slider -> text -> slider -> ...)
        self._syncing = False

        self.slider = widgets.FloatSlider(
            value=value,
            min=min,
            max=max,
            step=step,
            description="",
            continuous_update=True,
            readout=False,
            layout=widgets.Layout(width="220px"),
        )
        self.description_label = widgets.Label(
            value=description,
            layout=widgets.Layout(width="48px"),
        )
        self.number = widgets.Text(
            value=f"{value:.4g}",
            continuous_update=False,
            layout=widgets.Layout(width="60px"),
        )
        self.btn_reset = widgets.Button(
            description="↺",
            tooltip="Reset zoom and view",
            layout=widgets.Layout(width="22px", height="22px", padding="0px"),
        )

        super().__init__(
            [self.description_label, self.slider, self.number, self.btn_reset],
            layout=widgets.Layout(align_items="center", gap="4px"),
            **kwargs,
        )

        self.value = value
        traitlets.link((self, "value"), (self.slider, "value"))
        self.slider.observe(self._sync_number_from_slider, names="value")
        self.number.observe(self._commit_text_value, names="value")
        self.btn_reset.on_click(self._reset)

        self._sync_number_text(self.value)

    @property
    def min(self) -> float:
        return float(self.slider.min)

    @property
    def max(self) -> float:
        return float(self.slider.max)

    def observe_zoom(self, callback) -> Subscription:
        """Call ``callback(new_value)`` whenever the zoom value changes."""

        def _handler(change) -> None:
            callback(change.new)

        self.observe(_handler, names="value")
        return Subscription(lambda: self.unobserve(_handler, names="value"), name="zoom slider")

    def observe_reset(self, callback) -> Subscription:
        """Call ``callback()`` after the reset button restores the default zoom."""

        def _handler(_button) -> None:
            callback()

        self.btn_reset.on_click(_handler)
        return Subscription(lambda: self.btn_reset.on_click(_handler, remove=True), name="zoom reset")

    # --- Helpers --------------------------------------------------------------

    def _sync_number_text(self, val: float) -> None:
        """Set the text field from a numeric value, without triggering parse logic."""
        self._syncing = True
        try:
            self.number.value = f"{val:.4g}"
        finally:
            self._syncing = False

    def _sync_number_from_slider(self, change) -> None:
        if self._syncing:
            return
        self._sync_number_text(change.new)

    def _commit_text_value(self, change) -> None:
        """
        When the user commits text (Enter / blur):
          - parse via parse_real,
          - clamp to [min, max],
          - update self.value,
          - normalize the displayed text.

        On any error, revert to the value before this edit.
        """
        if self._syncing:
            return
        old_val = float(self.value)
        try:
            new_val = parse_real(change.new or "")
        except ValueError:
            self._sync_number_text(old_val)
            return
        self.value = max(self.min, min(new_val, self.max))
        self._sync_number_text(self.value)

    def _reset(self, _) -> None:
        self.value = self._default
