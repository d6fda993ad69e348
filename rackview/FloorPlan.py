"""Interactive floor plan orchestration for notebooks.

Purpose
-------
This module provides :class:`FloorPlan`, the notebook-facing object that
connects the geometry core to a live Plotly view:

- :func:`~rackview.floorplan_scene.build_scene` plans the racks, outlines and
  labels once per configuration and resolves the initial highlight;
- :class:`~rackview.viewport.ViewportController` owns the camera;
- :class:`~rackview.ZoomSlider.ZoomSlider` feeds zoom values in;
- :class:`~rackview.PlotlyPane.PlotlyPane` hosts the ``FigureWidget`` and
  feeds pointer drags and surface size in;
- :class:`~rackview.floorplan_render.OverlayLayer` owns the group highlight.

Architecture notes
------------------
Every listener ``FloorPlan`` attaches is held as a
:class:`~rackview.subscriptions.Subscription` inside one ``ExitStack``.
:meth:`FloorPlan.close` (or leaving a ``with FloorPlan(...)`` block) releases
all of them and removes the overlay trace, whichever way the block exits.

Important gotchas
-----------------
- The Plotly pane needs a real container height; ``height`` defaults to
  ``"70vh"``.
- Until the frontend reports the pane size the viewport is "not ready" and
  the figure keeps Plotly's default ranges.

Examples
--------
>>> from rackview import FloorPlan, OverlaySelection
>>> plan = FloorPlan(selection=OverlaySelection(row=1, start=0, end=2))  # doctest: +SKIP
>>> plan  # doctest: +SKIP
>>> plan.zoom = 4  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import time
from contextlib import ExitStack, contextmanager
from dataclasses import replace
from typing import Any, Iterator, Optional

import ipywidgets as widgets
import plotly.graph_objects as go
from IPython.display import display

from .PlotlyPane import PlotlyPane, PlotlyPaneStyle, PointerEvent, SurfaceSize
from .ZoomSlider import ZoomSlider
from .floorplan_render import FloorPlanStyle, OverlayLayer, apply_viewport, default_figure_layout, draw_scene
from .floorplan_scene import FloorPlanScene, build_scene
from .group_overlay import GroupOverlay, OverlaySelection, group_overlay
from .layout_planner import LayoutConfig
from .viewport import DEFAULT_DRAG_SENSITIVITY, DEFAULT_ZOOM, ViewportController, ViewportEvent

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class FloorPlan:
    """
    Interactive top-down rack floor plan.

    Parameters
    ----------
    config : LayoutConfig, optional
        Layout spacing and region sizes. Defaults to ``LayoutConfig()``.
    selection : OverlaySelection or None, optional
        Racks to highlight. ``None`` draws no overlay.
    zoom : float, optional
        Initial zoom (clamped to the slider range).
    aspect_ratio : float or None, optional
        Initial aspect ratio, for use before the frontend reports a size.
    drag_sensitivity : float, optional
        Screen pixels per world meter when panning.
    show_labels : bool, optional
        Draw ``"Rack <id>"`` labels.
    style : FloorPlanStyle, optional
        Plot styling.
    height : str, optional
        CSS height of the plot area.

    Raises
    ------
    OverlayConfigError
        If ``selection`` does not fit the planned layout.
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        selection: Optional[OverlaySelection] = OverlaySelection(),
        *,
        zoom: float = DEFAULT_ZOOM,
        aspect_ratio: Optional[float] = None,
        drag_sensitivity: float = DEFAULT_DRAG_SENSITIVITY,
        show_labels: bool = True,
        style: FloorPlanStyle = FloorPlanStyle(),
        height: str = "70vh",
    ) -> None:
        self._style = style
        self._scene = build_scene(config, selection, show_labels=show_labels)
        self._selection = selection
        self._render_info_last_log_t = 0.0
        self._render_debug_last_log_t = 0.0

        self._controller = ViewportController(
            zoom=zoom,
            aspect_ratio=aspect_ratio,
            drag_sensitivity=drag_sensitivity,
        )

        self._figure = go.FigureWidget()
        self._figure.update_layout(**default_figure_layout(style))
        draw_scene(self._figure, self._scene, zoom=self._controller.zoom, style=style)
        self._overlay = OverlayLayer(self._figure, style)

        self._pane = PlotlyPane(
            self._figure,
            style=PlotlyPaneStyle(
                padding_px=4,
                border="1px solid rgba(15,23,42,0.08)",
                border_radius_px=10,
                overflow="hidden",
            ),
        )
        self._zoom_slider = ZoomSlider(value=self._controller.zoom)
        self._root = widgets.VBox(
            [
                self._zoom_slider,
                widgets.Box([self._pane.widget], layout=widgets.Layout(width="100%", height=height)),
            ],
            layout=widgets.Layout(width="100%"),
        )

        self._subscriptions = ExitStack()
        self._subscriptions.callback(self._overlay.dispose)
        self._subscriptions.enter_context(self._zoom_slider.observe_zoom(self._controller.set_zoom))
        self._subscriptions.enter_context(self._controller.observe(self._on_viewport_change))
        self._subscriptions.enter_context(self._pane.driver.observe_pointer(self._on_pointer))
        self._subscriptions.enter_context(self._pane.driver.observe_size(self._on_surface_size))
        self._subscriptions.enter_context(self._zoom_slider.observe_reset(self._controller.reset_camera))
        self._closed = False

        if self._scene.overlay is not None:
            self._overlay.show(self._scene.overlay)
        self.render(reason="init")

    # --- Properties ---

    @property
    def scene(self) -> FloorPlanScene:
        """Return the current scene (placements, outlines, labels, overlay)."""
        return self._scene

    @property
    def controller(self) -> ViewportController:
        """Return the viewport controller that owns the camera."""
        return self._controller

    @property
    def figure_widget(self) -> go.FigureWidget:
        return self._figure

    @property
    def pane(self) -> PlotlyPane:
        return self._pane

    @property
    def zoom_slider(self) -> ZoomSlider:
        return self._zoom_slider

    @property
    def widget(self) -> widgets.Widget:
        """Return the root widget for embedding in custom layouts."""
        return self._root

    @property
    def selection(self) -> Optional[OverlaySelection]:
        return self._selection

    @property
    def overlay(self) -> Optional[GroupOverlay]:
        """Return the overlay currently drawn, if any."""
        return self._scene.overlay

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def zoom(self) -> float:
        return self._controller.zoom

    @zoom.setter
    def zoom(self, value: float) -> None:
        self._controller.set_zoom(value)

    # --- Overlay ---

    def set_selection(self, selection: Optional[OverlaySelection]) -> None:
        """Highlight ``selection``, replacing any current highlight.

        ``None`` removes the highlight. An invalid selection raises
        :class:`~rackview.group_overlay.OverlayConfigError` and leaves the
        current highlight unchanged.
        """
        self._require_open()
        if selection is None:
            self._overlay.clear()
            self._scene = replace(self._scene, overlay=None)
            self._selection = None
            return
        resolved = group_overlay(self._scene.placements, selection, self._scene.config)
        self._overlay.show(resolved)
        self._scene = replace(self._scene, overlay=resolved)
        self._selection = selection
        logger.info(f"overlay racks={resolved.rack_ids} color={resolved.color}")

    @contextmanager
    def highlight(self, selection: OverlaySelection) -> Iterator[GroupOverlay]:
        """Temporarily highlight ``selection``; the previous highlight returns on exit."""
        self._require_open()
        previous = self._selection
        self.set_selection(selection)
        try:
            yield self._scene.overlay
        finally:
            if not self._closed:
                self.set_selection(previous)

    # --- Rendering ---

    def render(self, reason: str = "manual") -> None:
        """
        Push the current camera into the figure.

        This is a *hot* method: it runs on every pointer move during a drag.
        """
        self._log_render(reason)
        if not apply_viewport(self._figure, self._controller.state, style=self._style):
            logger.debug(f"render(reason={reason}) skipped: viewport not ready")

    def _on_viewport_change(self, event: ViewportEvent) -> None:
        if event.reason == "zoom" and self._zoom_slider.value != event.new.zoom:
            self._zoom_slider.value = event.new.zoom
        self.render(reason=event.reason)

    def _on_pointer(self, event: PointerEvent) -> None:
        if event.kind == "down":
            self._controller.pointer_down(event.x, event.y)
        elif event.kind == "move":
            self._controller.pointer_move(event.x, event.y)
        else:
            self._controller.pointer_up()

    def _on_surface_size(self, size: SurfaceSize) -> None:
        self._controller.resize(size.width, size.height)

    def _log_render(self, reason: str) -> None:
        """Log render information with rate-limiting."""
        now = time.monotonic()
        if logger.isEnabledFor(logging.INFO) and (now - self._render_info_last_log_t) > 1.0:
            self._render_info_last_log_t = now
            logger.info(f"render(reason={reason}) racks={len(self._scene)}")

        if logger.isEnabledFor(logging.DEBUG) and (now - self._render_debug_last_log_t) > 0.5:
            self._render_debug_last_log_t = now
            logger.debug(f"extent={self._controller.visible_extent()} zoom={self._controller.zoom}")

    # --- Lifecycle ---

    def _require_open(self) -> None:
        if self._closed:
            raise RuntimeError("FloorPlan has been closed")

    def close(self) -> None:
        """Detach every listener and remove the overlay. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._subscriptions.close()
        self._scene = replace(self._scene, overlay=None)

    def _ipython_display_(self, **kwargs: Any) -> None:
        """Display the root widget in IPython."""
        display(self._root)

    def __enter__(self) -> "FloorPlan":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"FloorPlan(racks={len(self._scene)}, zoom={self.zoom}, {state})"
