"""Highlight outline around a run of racks in one horizontal row.

The outline is the bounding box of the selected placements grown by a
margin. That is only a faithful outline when the selection is a single,
evenly spaced row of horizontal racks, so :func:`group_outline` checks those
conditions and raises :class:`OverlayConfigError` rather than returning an
oversized box. A failing check almost always means the layout was resized
while the overlay selection was left unchanged.

Examples
--------
>>> from rackview.layout_planner import plan_layout
>>> from rackview.group_overlay import OverlaySelection, group_overlay
>>> overlay = group_overlay(plan_layout(), OverlaySelection())
>>> overlay.rack_ids
(20, 22, 24)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .layout_planner import LayoutConfig, RackPlacement, horizontal_row
from .rack_geometry import Orientation, RackOutline, rectangle
from .units import Dimension

_TOLERANCE = 1e-9


class OverlayConfigError(ValueError):
    """Overlay selection does not match the planned layout."""


@dataclass(frozen=True)
class OverlaySelection:
    """Which racks to highlight.

    Parameters
    ----------
    row : int
        Horizontal row index (``0`` is the near row).
    start, end : int
        Inclusive column range within the row.
    margin : float
        Clearance between the rack faces and the outline.
    color : str
        Outline color (any CSS color string).

    Notes
    -----
    The defaults select columns 0-2 of the far row, i.e. racks 20, 22 and 24
    of the default layout.
    """

    row: int = 1
    start: int = 0
    end: int = 2
    margin: float = 0.05
    color: str = "red"


@dataclass(frozen=True)
class GroupOverlay:
    """Resolved overlay: outline ring, color and the ids it encloses."""

    outline: RackOutline
    color: str
    rack_ids: tuple[int, ...]


def _check_single_row(selected: Sequence[RackPlacement]) -> None:
    if any(p.orientation is not Orientation.HORIZONTAL for p in selected):
        raise OverlayConfigError("group outline only supports racks from the horizontal-row region")
    centers = np.array([p.center for p in selected], dtype=float)
    if np.ptp(centers[:, 1]) > _TOLERANCE:
        raise OverlayConfigError("group outline selection must lie on a single row")
    steps = np.diff(centers[:, 0])
    if steps.size and not np.allclose(steps, steps[0], atol=_TOLERANCE):
        raise OverlayConfigError("group outline selection must be evenly spaced")


def group_outline(
    placements: Sequence[RackPlacement],
    index_range: tuple[int, int],
    margin: float,
    dims: Dimension,
) -> RackOutline:
    """Return the outline around ``placements[start..end]`` (inclusive).

    Parameters
    ----------
    placements : Sequence[RackPlacement]
        One horizontal row, in column order.
    index_range : tuple[int, int]
        Inclusive ``(start, end)`` indices into ``placements``.
    margin : float
        Distance between the outer rack faces and the outline.
    dims : Dimension
        Rack size.

    Raises
    ------
    OverlayConfigError
        If the range is empty or out of bounds, the margin is negative, or
        the selection is not one evenly spaced row of horizontal racks.
    """
    start, end = index_range
    if not 0 <= start <= end < len(placements):
        raise OverlayConfigError(
            f"overlay range [{start}, {end}] does not fit a row of {len(placements)} racks"
        )
    if not math.isfinite(margin) or margin < 0:
        raise OverlayConfigError(f"overlay margin must be a finite value >= 0, got {margin!r}")

    selected = placements[start:end + 1]
    _check_single_row(selected)

    centers = np.array([p.center for p in selected], dtype=float)
    left = centers[:, 0].min() - dims.width / 2 - margin
    right = centers[:, 0].max() + dims.width / 2 + margin
    bottom = centers[:, 1].min() - dims.depth / 2 - margin
    top = centers[:, 1].max() + dims.depth / 2 + margin
    return rectangle(left, bottom, right, top)


def group_overlay(
    placements: Sequence[RackPlacement],
    selection: OverlaySelection,
    config: LayoutConfig | None = None,
) -> GroupOverlay:
    """Resolve ``selection`` against a planned layout."""
    config = config or LayoutConfig()
    try:
        row = horizontal_row(placements, selection.row, config)
    except IndexError as exc:
        raise OverlayConfigError(str(exc)) from exc
    ring = group_outline(row, (selection.start, selection.end), selection.margin, config.dims)
    ids = tuple(p.id for p in row[selection.start:selection.end + 1])
    return GroupOverlay(outline=ring, color=selection.color, rack_ids=ids)


__all__ = ["GroupOverlay", "OverlayConfigError", "OverlaySelection", "group_outline", "group_overlay"]
