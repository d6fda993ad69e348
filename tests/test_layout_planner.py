from __future__ import annotations

import pytest

from rackview.layout_planner import (
    LayoutConfig,
    horizontal_region,
    horizontal_region_count,
    horizontal_row,
    plan_layout,
    vertical_region_count,
)
from rackview.rack_geometry import Orientation, Point2D
from rackview.units import RACK_DIMENSIONS

W = RACK_DIMENSIONS.width
D = RACK_DIMENSIONS.depth


def test_default_layout_has_vertical_then_horizontal_regions() -> None:
    placements = plan_layout()

    assert len(placements) == 30
    assert [p.orientation for p in placements[:18]] == [Orientation.VERTICAL] * 18
    assert [p.orientation for p in placements[18:]] == [Orientation.HORIZONTAL] * 12


def test_ids_are_contiguous_and_increasing() -> None:
    ids = [p.id for p in plan_layout()]
    assert ids == list(range(1, 31))


def test_plan_layout_is_idempotent() -> None:
    config = LayoutConfig(pair_gap=0.2, aisle_gap=1.1)
    assert plan_layout(config) == plan_layout(config)
    assert plan_layout() == plan_layout(LayoutConfig())


def test_vertical_cluster_positions_follow_visitation_order() -> None:
    config = LayoutConfig()
    placements = plan_layout(config)
    col_pitch = 2 * D + config.double_rack_gap + config.aisle_gap
    row_pitch = W + config.pair_gap
    offset = (D + config.double_rack_gap) / 2

    first, second, third = placements[0], placements[1], placements[2]
    assert first.center == pytest.approx(Point2D(-col_pitch - offset, -row_pitch))
    assert second.center == pytest.approx(Point2D(-col_pitch + offset, -row_pitch))
    # third rack starts the next pair up the same column
    assert third.center == pytest.approx(Point2D(-col_pitch - offset, 0.0))

    # last vertical rack: right rack of the top pair of the right column
    assert placements[17].center == pytest.approx(Point2D(col_pitch + offset, row_pitch))


def test_vertical_pairs_are_centered_on_origin() -> None:
    vertical = plan_layout()[:18]
    xs = [p.center.x for p in vertical]
    ys = [p.center.y for p in vertical]
    assert sum(xs) == pytest.approx(0.0, abs=1e-9)
    assert sum(ys) == pytest.approx(0.0, abs=1e-9)


def test_horizontal_rows_alternate_near_and_far() -> None:
    config = LayoutConfig()
    region = horizontal_region(plan_layout(config), config)
    start_x = -2.5 * (W + config.pair_gap)

    assert region[0].id == 19
    assert region[0].center == pytest.approx(Point2D(start_x, 3.5))
    assert region[1].center == pytest.approx(Point2D(start_x, 3.5 + D + config.pair_gap))
    assert region[2].center == pytest.approx(Point2D(start_x + W + config.pair_gap, 3.5))


def test_horizontal_row_selects_one_row_in_column_order() -> None:
    placements = plan_layout()
    far_row = horizontal_row(placements, 1)

    assert [p.id for p in far_row] == [20, 22, 24, 26, 28, 30]
    assert len({p.center.y for p in far_row}) == 1
    with pytest.raises(IndexError):
        horizontal_row(placements, 2)


def test_region_counts_drive_ids_and_threshold() -> None:
    config = LayoutConfig(cluster_columns=2, cluster_rows=4, row_count=3, row_length=5)
    placements = plan_layout(config)

    assert vertical_region_count(config) == 16
    assert horizontal_region_count(config) == 15
    assert len(placements) == 16 + 15
    assert placements[15].orientation is Orientation.VERTICAL
    assert placements[16].orientation is Orientation.HORIZONTAL
    assert placements[16].id == 17


def test_adjacent_pairs_leave_an_aisle() -> None:
    config = LayoutConfig()
    placements = plan_layout(config)
    right_of_first_column = placements[1]
    left_of_second_column = placements[6]
    gap = (left_of_second_column.center.x - D / 2) - (right_of_first_column.center.x + D / 2)
    assert gap == pytest.approx(config.aisle_gap)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pair_gap": -0.1},
        {"aisle_gap": float("inf")},
        {"double_rack_gap": -1},
        {"cluster_columns": 0},
        {"row_length": 2.5},
    ],
)
def test_layout_config_rejects_bad_values(kwargs) -> None:
    with pytest.raises(ValueError):
        LayoutConfig(**kwargs)
