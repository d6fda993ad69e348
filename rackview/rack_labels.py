"""Rack label placement."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .layout_planner import LayoutConfig, RackPlacement, vertical_region_count
from .rack_geometry import Point2D


@dataclass(frozen=True)
class LabelSpec:
    """Where and how to draw one rack label.

    Parameters
    ----------
    anchor : Point2D
        Label center; always the rack center.
    text : str
        Display text, ``"Rack <id>"``.
    rotated : bool
        ``True`` when the text should be turned 90 degrees to read along a
        vertical rack's long axis.
    """

    anchor: Point2D
    text: str
    rotated: bool


def label_for(placement: RackPlacement, config: LayoutConfig | None = None) -> LabelSpec:
    """Return the label for ``placement``.

    Racks of the vertical-cluster region (ids up to
    ``vertical_region_count(config)``) get rotated text.
    """
    threshold = vertical_region_count(config or LayoutConfig())
    return LabelSpec(
        anchor=placement.center,
        text=f"Rack {placement.id}",
        rotated=placement.id <= threshold,
    )


def labels_for(
    placements: Sequence[RackPlacement], config: LayoutConfig | None = None
) -> tuple[LabelSpec, ...]:
    """Return labels for a whole layout, in placement order."""
    config = config or LayoutConfig()
    return tuple(label_for(placement, config) for placement in placements)


def label_font_size(
    zoom: float,
    *,
    base_size: float = 11.0,
    reference_zoom: float = 6.0,
    min_size: float = 5.0,
) -> float:
    """Return a label font size (pixels) for the current zoom.

    A larger zoom shows more of the floor, so racks shrink on screen and the
    text shrinks with them. ``base_size`` is the size at ``reference_zoom``.
    """
    if zoom <= 0:
        raise ValueError(f"zoom must be > 0, got {zoom!r}")
    return max(min_size, base_size * reference_zoom / zoom)


__all__ = ["LabelSpec", "label_font_size", "label_for", "labels_for"]
