"""Warehouse layout planning.

Purpose
-------
``plan_layout`` turns a :class:`LayoutConfig` into the ordered list of rack
placements that every other part of the package consumes. The layout has two
regions, always visited in the same order so rack ids stay stable across
re-renders:

1. **Vertical clusters**: a grid of double-rack pairs (two racks back to
   back) whose long axis runs along y. Columns of pairs are separated by a
   walking aisle.
2. **Horizontal rows**: parallel rows of racks whose long axis runs along x,
   placed above the clusters at ``base_y``.

Ids start at 1 and are contiguous across both regions.

Examples
--------
>>> from rackview.layout_planner import LayoutConfig, plan_layout
>>> placements = plan_layout(LayoutConfig())
>>> len(placements), placements[0].id, placements[-1].id
(30, 1, 30)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from .rack_geometry import Orientation, Point2D, RackOutline, outline
from .units import RACK_DIMENSIONS, Dimension, feet


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing and region sizes for :func:`plan_layout`.

    Parameters
    ----------
    dims : Dimension
        Size of every rack.
    pair_gap : float
        Clearance between neighbouring pairs along a cluster column, and
        between neighbouring racks (and the two rows) of the horizontal
        region.
    aisle_gap : float
        Walking aisle between two double-rack columns.
    double_rack_gap : float
        Gap between the two back-to-back racks of one double-rack pair.
    base_y : float
        Center y of the first (near) horizontal row.
    cluster_columns, cluster_rows : int
        Number of double-rack columns and of pairs per column.
    row_count, row_length : int
        Number of horizontal rows and of racks per row.
    """

    dims: Dimension = field(default=RACK_DIMENSIONS)
    pair_gap: float = 0.1
    aisle_gap: float = feet(3)
    double_rack_gap: float = 0.1
    base_y: float = 3.5
    cluster_columns: int = 3
    cluster_rows: int = 3
    row_count: int = 2
    row_length: int = 6

    def __post_init__(self) -> None:
        for name in ("pair_gap", "aisle_gap", "double_rack_gap"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"LayoutConfig.{name} must be a finite value >= 0, got {value!r}")
        if not math.isfinite(self.base_y):
            raise ValueError(f"LayoutConfig.base_y must be finite, got {self.base_y!r}")
        for name in ("cluster_columns", "cluster_rows", "row_count", "row_length"):
            value = getattr(self, name)
            if int(value) != value or value < 1:
                raise ValueError(f"LayoutConfig.{name} must be an integer >= 1, got {value!r}")

    @property
    def column_pitch(self) -> float:
        """Center-to-center distance between double-rack columns."""
        return 2 * self.dims.depth + self.double_rack_gap + self.aisle_gap

    @property
    def pair_offset(self) -> float:
        """Distance from a pair's center to each of its two racks."""
        return (self.dims.depth + self.double_rack_gap) / 2

    @property
    def rack_pitch(self) -> float:
        """Center-to-center distance between racks laid end to end."""
        return self.dims.width + self.pair_gap

    @property
    def row_pitch(self) -> float:
        """Center-to-center distance between two horizontal rows."""
        return self.dims.depth + self.pair_gap

    @property
    def row_start_x(self) -> float:
        """Center x of the first rack of each horizontal row."""
        return -(self.row_length - 1) / 2 * self.rack_pitch


@dataclass(frozen=True)
class RackPlacement:
    """One rack in the layout: its id, center and orientation."""

    id: int
    center: Point2D
    orientation: Orientation

    def outline(self, dims: Dimension) -> RackOutline:
        """Return this rack's footprint for ``dims``."""
        return outline(self.center, self.orientation, dims)


def _centered(count: int, pitch: float) -> list[float]:
    """Return ``count`` positions spaced by ``pitch`` and centered on zero."""
    mid = (count - 1) / 2
    return [(index - mid) * pitch for index in range(count)]


def vertical_region_count(config: LayoutConfig) -> int:
    """Number of racks in the vertical-cluster region (two per pair)."""
    return config.cluster_columns * config.cluster_rows * 2


def horizontal_region_count(config: LayoutConfig) -> int:
    """Number of racks in the horizontal-row region."""
    return config.row_count * config.row_length


def plan_layout(config: LayoutConfig | None = None) -> tuple[RackPlacement, ...]:
    """Return every rack placement in visitation order.

    Parameters
    ----------
    config : LayoutConfig, optional
        Spacing and region sizes. Defaults to ``LayoutConfig()``.

    Returns
    -------
    tuple[RackPlacement, ...]
        Vertical-cluster racks (column-major, then row, then left before
        right) followed by horizontal-row racks (column, then near row before
        far row). Ids run from 1 to the total rack count.
    """
    config = config or LayoutConfig()
    placements: list[RackPlacement] = []
    next_id = 1

    for col_x in _centered(config.cluster_columns, config.column_pitch):
        for row_y in _centered(config.cluster_rows, config.rack_pitch):
            for side in (-1, 1):
                center = Point2D(col_x + side * config.pair_offset, row_y)
                placements.append(RackPlacement(next_id, center, Orientation.VERTICAL))
                next_id += 1

    for column in range(config.row_length):
        x = config.row_start_x + column * config.rack_pitch
        for row in range(config.row_count):
            center = Point2D(x, config.base_y + row * config.row_pitch)
            placements.append(RackPlacement(next_id, center, Orientation.HORIZONTAL))
            next_id += 1

    return tuple(placements)


def horizontal_region(
    placements: Sequence[RackPlacement], config: LayoutConfig | None = None
) -> tuple[RackPlacement, ...]:
    """Return the horizontal-row slice of a planned layout."""
    config = config or LayoutConfig()
    return tuple(placements[vertical_region_count(config):])


def horizontal_row(
    placements: Sequence[RackPlacement], row: int, config: LayoutConfig | None = None
) -> tuple[RackPlacement, ...]:
    """Return one horizontal row in column order.

    Row ``0`` is the near row at ``base_y``; higher rows step away from the
    clusters.

    Raises
    ------
    IndexError
        If ``row`` is not a row of the horizontal region.
    """
    config = config or LayoutConfig()
    if not 0 <= row < config.row_count:
        raise IndexError(f"row {row} is outside the horizontal region (0..{config.row_count - 1})")
    return horizontal_region(placements, config)[row::config.row_count]


__all__ = [
    "LayoutConfig",
    "RackPlacement",
    "horizontal_region",
    "horizontal_region_count",
    "horizontal_row",
    "plan_layout",
    "vertical_region_count",
]
