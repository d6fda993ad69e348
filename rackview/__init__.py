"""Top-level public API for the ``rackview`` package.

The geometry core (planning, outlines, labels, overlay, viewport) has no
notebook dependencies and can be used on its own:

>>> from rackview import plan_layout, label_for
>>> label_for(plan_layout()[0]).text
'Rack 1'

The interactive view lives in :class:`FloorPlan`:

>>> from rackview import FloorPlan  # doctest: +SKIP
>>> FloorPlan()  # doctest: +SKIP
"""

from .FloorPlan import FloorPlan
from .PlotlyPane import PlotlyPane, PlotlyPaneStyle, PointerDriver, PointerEvent, SurfaceSize
from .ZoomSlider import ZoomSlider
from .floorplan_render import FloorPlanStyle, OverlayLayer
from .floorplan_scene import FloorPlanScene, build_scene
from .group_overlay import GroupOverlay, OverlayConfigError, OverlaySelection, group_outline, group_overlay
from .layout_planner import (
    LayoutConfig,
    RackPlacement,
    horizontal_region,
    horizontal_region_count,
    horizontal_row,
    plan_layout,
    vertical_region_count,
)
from .rack_geometry import Orientation, Point2D, RackOutline, outline, rectangle
from .rack_labels import LabelSpec, label_font_size, label_for, labels_for
from .subscriptions import EventSource, Subscription
from .units import RACK_DIMENSIONS, UNIT, Dimension, feet
from .viewport import (
    ZOOM_MAX,
    ZOOM_MIN,
    FrustumBounds,
    ViewportController,
    ViewportEvent,
    ViewportState,
    clamp_zoom,
)
