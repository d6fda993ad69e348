"""Immutable description of everything a renderer needs to draw the floor plan.

A ``FloorPlanScene`` bundles the planned placements with their outlines,
labels and the optional group overlay. Renderers only read it; the geometry
core never touches rendering-library objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .group_overlay import GroupOverlay, OverlaySelection, group_overlay
from .layout_planner import LayoutConfig, RackPlacement, plan_layout
from .rack_geometry import RackOutline
from .rack_labels import LabelSpec, labels_for


@dataclass(frozen=True)
class FloorPlanScene:
    """Immutable record of one layout generation pass.

    Parameters
    ----------
    config : LayoutConfig
        Configuration the scene was planned from.
    placements : tuple[RackPlacement, ...]
        Racks in visitation order.
    outlines : tuple[RackOutline, ...]
        Footprint of each placement, same order.
    labels : tuple[LabelSpec, ...]
        Label of each placement, same order. Empty when labeling is off.
    overlay : GroupOverlay or None
        Resolved highlight, if a selection was given.
    """

    config: LayoutConfig
    placements: tuple[RackPlacement, ...]
    outlines: tuple[RackOutline, ...]
    labels: tuple[LabelSpec, ...]
    overlay: Optional[GroupOverlay] = None

    def __len__(self) -> int:
        return len(self.placements)

    def __repr__(self) -> str:
        return (
            f"FloorPlanScene(racks={len(self.placements)}, "
            f"labels={len(self.labels)}, overlay={self.overlay is not None})"
        )


def build_scene(
    config: Optional[LayoutConfig] = None,
    selection: Optional[OverlaySelection] = None,
    *,
    show_labels: bool = True,
) -> FloorPlanScene:
    """Plan the layout and derive outlines, labels and overlay.

    Raises
    ------
    OverlayConfigError
        If ``selection`` does not fit the planned layout.
    """
    config = config or LayoutConfig()
    placements = plan_layout(config)
    return FloorPlanScene(
        config=config,
        placements=placements,
        outlines=tuple(p.outline(config.dims) for p in placements),
        labels=labels_for(placements, config) if show_labels else (),
        overlay=group_overlay(placements, selection, config) if selection is not None else None,
    )


__all__ = ["FloorPlanScene", "build_scene"]
