"""Property-based checks for the layout, overlay and viewport invariants."""

from __future__ import annotations

import math

import pytest

from rackview.group_overlay import group_outline
from rackview.layout_planner import (
    LayoutConfig,
    horizontal_region,
    horizontal_region_count,
    horizontal_row,
    plan_layout,
    vertical_region_count,
)
from rackview.rack_geometry import Orientation, outline_bounds
from rackview.rack_labels import label_for
from rackview.viewport import ZOOM_MAX, ZOOM_MIN, ViewportController

try:
    from hypothesis import given
    from hypothesis import strategies as st
except ModuleNotFoundError:  # pragma: no cover - environment-specific fallback
    pytest.skip("hypothesis is required for property-based tests", allow_module_level=True)


GAPS = st.floats(min_value=0.0, max_value=5.0, allow_nan=False)
COUNTS = st.integers(min_value=1, max_value=5)
ANY_FLOAT = st.floats(allow_nan=False)


@given(
    pair_gap=GAPS,
    aisle_gap=GAPS,
    cluster_columns=COUNTS,
    cluster_rows=COUNTS,
    row_count=COUNTS,
    row_length=COUNTS,
)
def test_layout_regions_and_labels(pair_gap, aisle_gap, cluster_columns, cluster_rows, row_count, row_length) -> None:
    config = LayoutConfig(
        pair_gap=pair_gap,
        aisle_gap=aisle_gap,
        cluster_columns=cluster_columns,
        cluster_rows=cluster_rows,
        row_count=row_count,
        row_length=row_length,
    )
    placements = plan_layout(config)
    n_vertical = vertical_region_count(config)

    assert [p.id for p in placements] == list(range(1, len(placements) + 1))
    assert horizontal_region_count(config) == row_count * row_length
    assert len(placements) == n_vertical + horizontal_region_count(config)
    assert len(horizontal_region(placements, config)) == horizontal_region_count(config)
    for p in placements:
        assert (p.orientation is Orientation.VERTICAL) == (p.id <= n_vertical)
        assert label_for(p, config).rotated == (p.id <= n_vertical)


@given(margin=st.floats(min_value=0.0, max_value=2.0), start=st.integers(0, 5), span=st.integers(0, 5))
def test_group_outline_contains_selected_racks(margin, start, span) -> None:
    config = LayoutConfig()
    row = horizontal_row(plan_layout(config), 1, config)
    end = min(start + span, len(row) - 1)
    left, bottom, right, top = outline_bounds(group_outline(row, (start, end), margin, config.dims))

    for p in row[start:end + 1]:
        r_left, r_bottom, r_right, r_top = outline_bounds(p.outline(config.dims))
        assert left <= r_left - margin + 1e-9
        assert right >= r_right + margin - 1e-9
        assert bottom <= r_bottom - margin + 1e-9
        assert top >= r_top + margin - 1e-9


@given(zoom=ANY_FLOAT, aspect=st.floats(min_value=1e-3, max_value=1e3))
def test_zoom_stays_in_range_and_frustum_matches_aspect(zoom, aspect) -> None:
    vp = ViewportController(aspect_ratio=aspect)
    vp.set_zoom(zoom)
    assert ZOOM_MIN <= vp.zoom <= ZOOM_MAX

    frustum = vp.frustum_bounds()
    assert math.isclose(frustum.width / frustum.height, aspect, rel_tol=1e-9)
    assert math.isclose(frustum.top, vp.zoom)


@given(
    moves=st.lists(
        st.tuples(st.floats(-1e4, 1e4), st.floats(-1e4, 1e4)),
        min_size=1,
        max_size=10,
    )
)
def test_drag_is_path_independent(moves) -> None:
    vp = ViewportController(drag_sensitivity=100)
    vp.pointer_down(0.0, 0.0)
    for x, y in moves:
        vp.pointer_move(x, y)
    last_x, last_y = moves[-1]

    assert math.isclose(vp.camera_position.x, -last_x / 100, abs_tol=1e-6)
    assert math.isclose(vp.camera_position.y, last_y / 100, abs_tol=1e-6)
    assert vp.zoom == 6.0
