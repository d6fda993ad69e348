"""Plotly render binding for :class:`~rackview.floorplan_scene.FloorPlanScene`.

Purpose
-------
This module is the only place that knows how the floor plan looks in Plotly.
It turns scene geometry into traces and annotations and turns viewport state
into axis ranges:

- all rack outlines become a single ``Scatter`` line trace (rings separated
  by ``None`` gaps);
- labels become layout annotations, turned with ``textangle=-90`` when the
  label asks for rotation;
- the group overlay is a separate trace drawn after the racks, owned by an
  :class:`OverlayLayer` that removes it again when the selection changes or
  the layer is disposed.

Plotly's own drag/zoom handling is switched off (``fixedrange`` axes,
``dragmode=False``); panning and zooming are driven by
:class:`~rackview.viewport.ViewportController` and applied with
:func:`apply_viewport`.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Sequence

import plotly.graph_objects as go

from .floorplan_scene import FloorPlanScene
from .group_overlay import GroupOverlay
from .rack_geometry import Point2D
from .rack_labels import LabelSpec, label_font_size
from .viewport import ViewportState

RACKS_TRACE_NAME = "racks"
OVERLAY_TRACE_NAME = "group-outline"


@dataclass(frozen=True)
class FloorPlanStyle:
    """Visual options for the Plotly floor plan.

    Parameters
    ----------
    rack_color:
        Outline color of every rack.
    rack_line_width:
        Rack outline width in pixels.
    overlay_line_width:
        Group overlay outline width in pixels.
    label_color:
        Label text color.
    label_base_size:
        Label font size (pixels) at the reference zoom of 6; scaled inversely
        with zoom.
    background:
        Paper and plot background. Transparent by default so the plan sits on
        whatever the notebook shows behind it.
    """

    rack_color: str = "black"
    rack_line_width: float = 1.0
    overlay_line_width: float = 2.0
    label_color: str = "black"
    label_base_size: float = 11.0
    background: str = "rgba(0,0,0,0)"


def ring_coordinates(rings: Iterable[Sequence[Point2D]]) -> tuple[list[Optional[float]], list[Optional[float]]]:
    """Flatten closed rings into Plotly ``x``/``y`` lists with ``None`` breaks."""
    xs: list[Optional[float]] = []
    ys: list[Optional[float]] = []
    for ring in rings:
        if xs:
            xs.append(None)
            ys.append(None)
        for x, y in ring:
            xs.append(x)
            ys.append(y)
    return xs, ys


def default_figure_layout(style: FloorPlanStyle) -> dict[str, Any]:
    """Return the Plotly layout shared by every floor plan figure."""
    hidden_axis = dict(
        visible=False,
        fixedrange=True,
        showgrid=False,
        zeroline=False,
    )
    return dict(
        autosize=True,
        showlegend=False,
        dragmode=False,
        hovermode=False,
        margin=dict(l=0, r=0, t=0, b=0),
        paper_bgcolor=style.background,
        plot_bgcolor=style.background,
        xaxis=dict(hidden_axis),
        yaxis=dict(hidden_axis),
    )


def rack_trace(scene: FloorPlanScene, style: FloorPlanStyle) -> go.Scatter:
    """Return one line trace drawing every rack outline."""
    xs, ys = ring_coordinates(scene.outlines)
    return go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        name=RACKS_TRACE_NAME,
        line=dict(color=style.rack_color, width=style.rack_line_width),
        hoverinfo="skip",
        showlegend=False,
    )


def label_annotations(
    labels: Sequence[LabelSpec], zoom: float, style: FloorPlanStyle
) -> list[dict[str, Any]]:
    """Return Plotly annotation dicts for ``labels`` at the given zoom."""
    size = label_font_size(zoom, base_size=style.label_base_size)
    return [
        dict(
            x=label.anchor.x,
            y=label.anchor.y,
            xref="x",
            yref="y",
            text=label.text,
            showarrow=False,
            textangle=-90 if label.rotated else 0,
            font=dict(color=style.label_color, size=size),
        )
        for label in labels
    ]


def overlay_trace(overlay: GroupOverlay, style: FloorPlanStyle) -> go.Scatter:
    """Return the line trace for a group overlay."""
    xs, ys = ring_coordinates([overlay.outline])
    return go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        name=OVERLAY_TRACE_NAME,
        line=dict(color=overlay.color, width=style.overlay_line_width),
        hoverinfo="skip",
        showlegend=False,
    )


def draw_scene(figure: go.Figure, scene: FloorPlanScene, *, zoom: float, style: FloorPlanStyle) -> None:
    """Replace the rack trace and labels on ``figure`` with ``scene``.

    The rack trace is updated in place so traces added later (the group
    overlay) stay on top. The overlay itself is drawn by :class:`OverlayLayer`.
    """
    trace = rack_trace(scene, style)
    existing = [t for t in figure.data if t.name == RACKS_TRACE_NAME]
    if existing:
        existing[0].update(x=trace.x, y=trace.y, line=trace.line)
    else:
        figure.add_trace(trace)
    figure.layout.annotations = label_annotations(scene.labels, zoom, style)


def apply_viewport(figure: go.Figure, state: ViewportState, *, style: FloorPlanStyle) -> bool:
    """Push camera state into the axis ranges and label sizes of ``figure``.

    Returns
    -------
    bool
        ``False`` (and leaves ``figure`` untouched) while the viewport has no
        usable aspect ratio.
    """
    frustum = state.frustum
    if frustum is None:
        return False
    cx, cy = state.camera_position
    size = label_font_size(state.zoom, base_size=style.label_base_size)
    with figure.batch_update():
        figure.layout.xaxis.range = (cx + frustum.left, cx + frustum.right)
        figure.layout.yaxis.range = (cy + frustum.bottom, cy + frustum.top)
        figure.update_annotations(font_size=size)
    return True


class OverlayLayer:
    """Own the group-overlay trace on one figure.

    At most one overlay trace exists at a time. :meth:`show` replaces the
    current trace, :meth:`clear` removes it, and :meth:`dispose` clears and
    refuses further use. The layer is also a context manager, and
    :meth:`scoped` shows an overlay only for the duration of a ``with`` block.

    Parameters
    ----------
    figure : plotly.graph_objects.Figure
        Figure (usually a ``FigureWidget``) that hosts the trace.
    style : FloorPlanStyle
        Line styling.
    """

    def __init__(self, figure: go.Figure, style: FloorPlanStyle) -> None:
        self._figure = figure
        self._style = style
        self._trace_handle: Optional[go.Scatter] = None
        self._overlay: Optional[GroupOverlay] = None
        self._disposed = False

    @property
    def overlay(self) -> Optional[GroupOverlay]:
        """Return the overlay currently drawn, if any."""
        return self._overlay

    @property
    def disposed(self) -> bool:
        return self._disposed

    def show(self, overlay: GroupOverlay) -> None:
        """Draw ``overlay``, removing any previously drawn one first."""
        if self._disposed:
            raise RuntimeError("OverlayLayer has been disposed")
        self.clear()
        self._figure.add_trace(overlay_trace(overlay, self._style))
        # FigureWidget assigns its own uid, so keep the stored trace object.
        self._trace_handle = self._figure.data[-1]
        self._overlay = overlay

    def clear(self) -> None:
        """Remove the drawn overlay trace, if any."""
        handle, self._trace_handle = self._trace_handle, None
        self._overlay = None
        if handle is None:
            return
        self._figure.data = tuple(t for t in self._figure.data if t is not handle)

    def dispose(self) -> None:
        """Remove the trace and detach from the figure."""
        if self._disposed:
            return
        try:
            self.clear()
        finally:
            self._disposed = True

    @contextmanager
    def scoped(self, overlay: GroupOverlay) -> Iterator[GroupOverlay]:
        """Show ``overlay`` inside a ``with`` block and remove it on exit."""
        self.show(overlay)
        try:
            yield overlay
        finally:
            self.clear()

    def __enter__(self) -> "OverlayLayer":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.dispose()


__all__ = [
    "FloorPlanStyle",
    "OverlayLayer",
    "apply_viewport",
    "default_figure_layout",
    "draw_scene",
    "label_annotations",
    "overlay_trace",
    "rack_trace",
    "ring_coordinates",
]
