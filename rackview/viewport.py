"""Orthographic camera state for the top-down floor plan.

Purpose
-------
``ViewportController`` is the only owner of the camera. It holds the current
zoom, the render surface aspect ratio and the camera position, and it exposes:

- pure queries: :meth:`ViewportController.frustum_bounds`,
  :meth:`ViewportController.visible_extent`;
- explicit mutators: :meth:`~ViewportController.set_zoom`,
  :meth:`~ViewportController.set_aspect_ratio` /
  :meth:`~ViewportController.resize`, and the pointer-drag transitions
  :meth:`~ViewportController.pointer_down`,
  :meth:`~ViewportController.pointer_move`,
  :meth:`~ViewportController.pointer_up`.

State model
-----------
The controller is either idle or dragging. A drag starts on pointer-down,
moves the camera by ``delta / drag_sensitivity`` on every pointer-move (y is
flipped because screen y grows downward) and ends on pointer-up. There is no
inertia and no limit on how far the camera can travel.

The frustum is never stored: it is recomputed from ``zoom`` and
``aspect_ratio`` on every query, so a resize can never leave it stale. Until
the render surface reports a usable size the aspect ratio is ``None`` and
:meth:`frustum_bounds` returns ``None`` ("not ready").

All mutation happens on the notebook event thread; the controller does no
locking.

Examples
--------
>>> from rackview.viewport import ViewportController
>>> vp = ViewportController(zoom=6, aspect_ratio=2.0)
>>> vp.frustum_bounds()
FrustumBounds(left=-12.0, right=12.0, top=6.0, bottom=-6.0)
>>> vp.set_zoom(40)
>>> vp.zoom
15.0
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from numbers import Real
from typing import Any, Callable, Optional

from .rack_geometry import Point2D
from .subscriptions import EventSource, Subscription

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

ZOOM_MIN = 2.0
ZOOM_MAX = 15.0
DEFAULT_ZOOM = 6.0
DEFAULT_DRAG_SENSITIVITY = 100.0  # screen pixels per world meter


def clamp_zoom(value: Any) -> float:
    """Return ``value`` clamped to ``[ZOOM_MIN, ZOOM_MAX]``.

    Raises
    ------
    ValueError
        If ``value`` is not a real number or is NaN.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"zoom must be a real number, got {value!r}")
    zoom = float(value)
    if math.isnan(zoom):
        raise ValueError("zoom must not be NaN")
    return max(ZOOM_MIN, min(zoom, ZOOM_MAX))


def _usable_aspect(value: Optional[float]) -> Optional[float]:
    """Return ``value`` as a float if it can size a frustum, else ``None``."""
    if value is None:
        return None
    try:
        aspect = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(aspect) or aspect <= 0:
        return None
    return aspect


@dataclass(frozen=True)
class FrustumBounds:
    """Orthographic view volume bounds, relative to the camera."""

    left: float
    right: float
    top: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom


@dataclass(frozen=True)
class ViewportState:
    """Snapshot of the camera.

    Parameters
    ----------
    zoom : float
        Half the visible world height, already clamped.
    aspect_ratio : float or None
        Render surface width / height, or ``None`` while the surface has no
        usable size.
    camera_position : Point2D
        World point at the center of the view.
    """

    zoom: float
    aspect_ratio: Optional[float]
    camera_position: Point2D

    @property
    def frustum(self) -> Optional[FrustumBounds]:
        """Frustum for this state, or ``None`` when not ready."""
        if self.aspect_ratio is None:
            return None
        half_w = self.zoom * self.aspect_ratio
        return FrustumBounds(left=-half_w, right=half_w, top=self.zoom, bottom=-self.zoom)


@dataclass(frozen=True)
class ViewportEvent:
    """Change notification delivered to viewport observers.

    Parameters
    ----------
    reason : str
        What changed: ``"zoom"``, ``"resize"``, ``"drag"`` or ``"reset"``.
    old : ViewportState
        State before the change.
    new : ViewportState
        State after the change.
    """

    reason: str
    old: ViewportState
    new: ViewportState


class ViewportController:
    """Own and mutate the orthographic camera.

    Parameters
    ----------
    zoom : float, optional
        Initial zoom; clamped to ``[ZOOM_MIN, ZOOM_MAX]``.
    aspect_ratio : float or None, optional
        Initial aspect ratio. ``None`` (the default) means the render surface
        has not reported its size yet.
    camera_position : Point2D, optional
        Initial camera center.
    drag_sensitivity : float, optional
        Screen pixels of pointer travel per world meter of camera travel.
    """

    def __init__(
        self,
        *,
        zoom: float = DEFAULT_ZOOM,
        aspect_ratio: Optional[float] = None,
        camera_position: Point2D = Point2D(0.0, 0.0),
        drag_sensitivity: float = DEFAULT_DRAG_SENSITIVITY,
    ) -> None:
        if not math.isfinite(drag_sensitivity) or drag_sensitivity <= 0:
            raise ValueError(f"drag_sensitivity must be > 0, got {drag_sensitivity!r}")
        self._drag_sensitivity = float(drag_sensitivity)
        self._home = Point2D(float(camera_position[0]), float(camera_position[1]))
        self._state = ViewportState(
            zoom=clamp_zoom(zoom),
            aspect_ratio=_usable_aspect(aspect_ratio),
            camera_position=self._home,
        )
        self._dragging = False
        self._last_pointer: Optional[tuple[float, float]] = None
        self._changes: EventSource[ViewportEvent] = EventSource("viewport")

    # --- Queries ---

    @property
    def state(self) -> ViewportState:
        """Return the current immutable state snapshot."""
        return self._state

    @property
    def zoom(self) -> float:
        return self._state.zoom

    @property
    def aspect_ratio(self) -> Optional[float]:
        return self._state.aspect_ratio

    @property
    def camera_position(self) -> Point2D:
        return self._state.camera_position

    @property
    def drag_sensitivity(self) -> float:
        return self._drag_sensitivity

    @property
    def is_dragging(self) -> bool:
        """Return ``True`` between pointer-down and pointer-up."""
        return self._dragging

    @property
    def is_ready(self) -> bool:
        """Return ``True`` once a usable aspect ratio is known."""
        return self._state.aspect_ratio is not None

    def frustum_bounds(self) -> Optional[FrustumBounds]:
        """Return the frustum for the current zoom and aspect ratio.

        Returns ``None`` while the render surface has no usable size.
        """
        return self._state.frustum

    def visible_extent(self) -> Optional[tuple[tuple[float, float], tuple[float, float]]]:
        """Return the visible world window as ``((x0, x1), (y0, y1))``.

        This is the frustum shifted by the camera position, i.e. the axis
        ranges a 2D renderer should show. ``None`` when not ready.
        """
        frustum = self.frustum_bounds()
        if frustum is None:
            return None
        cx, cy = self._state.camera_position
        return (cx + frustum.left, cx + frustum.right), (cy + frustum.bottom, cy + frustum.top)

    def observe(self, callback: Callable[[ViewportEvent], Any]) -> Subscription:
        """Call ``callback(event)`` after every state change."""
        return self._changes.subscribe(callback)

    # --- Mutators ---

    def set_zoom(self, value: Any) -> None:
        """Set the zoom, clamping out-of-range values."""
        zoom = clamp_zoom(value)
        if zoom != float(value):
            logger.debug(f"zoom {value!r} clamped to {zoom}")
        self._commit("zoom", zoom=zoom)

    def set_aspect_ratio(self, value: Optional[float]) -> bool:
        """Set the aspect ratio.

        Zero, negative or non-finite values mark the viewport as not ready;
        the frustum stays unavailable until the next usable value.

        Returns
        -------
        bool
            ``True`` if the viewport is ready after the update.
        """
        aspect = _usable_aspect(value)
        if aspect is None:
            logger.debug(f"aspect ratio {value!r} not usable; viewport not ready")
        self._commit("resize", aspect_ratio=aspect)
        return aspect is not None

    def resize(self, width_px: float, height_px: float) -> bool:
        """Update the aspect ratio from render surface pixel size."""
        try:
            aspect = float(width_px) / float(height_px)
        except (TypeError, ValueError, ZeroDivisionError):
            aspect = None
        return self.set_aspect_ratio(aspect)

    def pointer_down(self, x: float, y: float) -> None:
        """Start a drag at screen position ``(x, y)``."""
        self._dragging = True
        self._last_pointer = (float(x), float(y))

    def pointer_move(self, x: float, y: float) -> None:
        """Pan the camera by the pointer travel since the last event.

        Ignored unless a drag is in progress.
        """
        if not self._dragging or self._last_pointer is None:
            return
        last_x, last_y = self._last_pointer
        dx = float(x) - last_x
        dy = float(y) - last_y
        self._last_pointer = (float(x), float(y))
        if dx == 0 and dy == 0:
            return
        cx, cy = self._state.camera_position
        moved = Point2D(
            cx - dx / self._drag_sensitivity,
            cy + dy / self._drag_sensitivity,
        )
        self._commit("drag", camera_position=moved)

    def pointer_up(self) -> None:
        """End the current drag, if any."""
        self._dragging = False
        self._last_pointer = None

    def reset_camera(self) -> None:
        """Move the camera back to its initial position."""
        self.pointer_up()
        self._commit("reset", camera_position=self._home)

    def _commit(self, reason: str, **changes: Any) -> None:
        old = self._state
        new = replace(old, **changes)
        if new == old:
            return
        self._state = new
        self._changes.emit(ViewportEvent(reason=reason, old=old, new=new))
