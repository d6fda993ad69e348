from __future__ import annotations

import pytest

from rackview.rack_geometry import Orientation, Point2D, outline, outline_bounds, rectangle
from rackview.units import RACK_DIMENSIONS, UNIT, Dimension, feet


def test_rack_dimensions_are_derived_from_feet() -> None:
    assert UNIT == 0.3048
    assert RACK_DIMENSIONS.width == pytest.approx(4 * UNIT)
    assert RACK_DIMENSIONS.depth == pytest.approx(1.5 * UNIT)
    assert RACK_DIMENSIONS.height == pytest.approx(7 * UNIT)
    assert feet(10) == pytest.approx(3.048)


@pytest.mark.parametrize("width, depth", [(0.0, 1.0), (1.0, 0.0), (-1.0, 1.0), (float("nan"), 1.0)])
def test_dimension_rejects_non_positive_extents(width: float, depth: float) -> None:
    with pytest.raises(ValueError):
        Dimension(width=width, depth=depth)


def test_dimension_is_immutable() -> None:
    with pytest.raises(AttributeError):
        RACK_DIMENSIONS.width = 2.0  # type: ignore[misc]


def test_horizontal_outline_is_closed_ring_with_long_axis_on_x() -> None:
    dims = Dimension(width=4.0, depth=1.0)
    ring = outline(Point2D(10.0, 5.0), Orientation.HORIZONTAL, dims)

    assert len(ring) == 5
    assert ring[0] == ring[-1]
    assert ring[:4] == (
        Point2D(8.0, 4.5),
        Point2D(12.0, 4.5),
        Point2D(12.0, 5.5),
        Point2D(8.0, 5.5),
    )


def test_vertical_outline_swaps_half_extents() -> None:
    dims = Dimension(width=4.0, depth=1.0)
    left, bottom, right, top = outline_bounds(outline(Point2D(0.0, 0.0), Orientation.VERTICAL, dims))

    assert right - left == pytest.approx(1.0)
    assert top - bottom == pytest.approx(4.0)


def test_outline_ignores_height() -> None:
    short = Dimension(width=2.0, depth=1.0, height=0.5)
    tall = Dimension(width=2.0, depth=1.0, height=9.0)
    center = Point2D(1.0, -1.0)
    assert outline(center, Orientation.HORIZONTAL, short) == outline(center, Orientation.HORIZONTAL, tall)


def test_rectangle_and_bounds_agree() -> None:
    ring = rectangle(-1, -2, 3, 4)
    assert ring[0] == ring[-1]
    assert outline_bounds(ring) == (-1.0, -2.0, 3.0, 4.0)
