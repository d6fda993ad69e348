"""Planar geometry primitives for rack footprints.

The floor plan is a top-down projection, so every rack collapses to an
axis-aligned rectangle. Outlines are closed rings of five points (the first
corner is repeated at the end) because that is what line renderers expect
when drawing a rectangle as one polyline.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Sequence

import numpy as np

from .units import Dimension


class Point2D(NamedTuple):
    """A position in the projection plane (meters)."""

    x: float
    y: float


class Orientation(Enum):
    """Direction of a rack's long axis in the projection plane."""

    HORIZONTAL = "horizontal"  # long axis along x
    VERTICAL = "vertical"  # long axis along y


RackOutline = tuple[Point2D, Point2D, Point2D, Point2D, Point2D]


def rectangle(left: float, bottom: float, right: float, top: float) -> RackOutline:
    """Return a closed ring for the given bounds.

    Corners are emitted bottom-left, bottom-right, top-right, top-left and the
    first corner is repeated to close the ring.
    """
    first = Point2D(float(left), float(bottom))
    return (
        first,
        Point2D(float(right), float(bottom)),
        Point2D(float(right), float(top)),
        Point2D(float(left), float(top)),
        first,
    )


def outline(center: Point2D, orientation: Orientation, dims: Dimension) -> RackOutline:
    """Return the footprint of one rack.

    Parameters
    ----------
    center : Point2D
        Rack center in world coordinates.
    orientation : Orientation
        ``VERTICAL`` swaps the half extents so the long axis runs along y.
    dims : Dimension
        Rack size; ``height`` is ignored.

    Returns
    -------
    RackOutline
        Five points, closed (first point equals last point).
    """
    half_long = dims.width / 2
    half_short = dims.depth / 2
    if orientation is Orientation.VERTICAL:
        half_w, half_d = half_short, half_long
    else:
        half_w, half_d = half_long, half_short
    cx, cy = center
    return rectangle(cx - half_w, cy - half_d, cx + half_w, cy + half_d)


def outline_bounds(ring: Sequence[Point2D]) -> tuple[float, float, float, float]:
    """Return ``(left, bottom, right, top)`` of a ring of points."""
    coords = np.asarray(ring, dtype=float)
    left, bottom = coords.min(axis=0)
    right, top = coords.max(axis=0)
    return float(left), float(bottom), float(right), float(top)


__all__ = ["Orientation", "Point2D", "RackOutline", "outline", "outline_bounds", "rectangle"]
