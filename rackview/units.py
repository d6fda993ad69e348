"""Physical units and rack dimensions.

All geometry in ``rackview`` is expressed in meters. Rack sizes are quoted in
feet by the hardware vendor, so this module keeps the foot conversion in one
place and exposes the default rack footprint as an immutable
:class:`Dimension`.

Examples
--------
>>> from rackview.units import RACK_DIMENSIONS, feet
>>> round(feet(4), 4)
1.2192
>>> RACK_DIMENSIONS.width == feet(4)
True
"""

from __future__ import annotations

import math
from dataclasses import dataclass

UNIT = 0.3048  # meters per foot


def feet(value: float) -> float:
    """Return ``value`` feet expressed in meters."""
    return float(value) * UNIT


@dataclass(frozen=True)
class Dimension:
    """Immutable rack size in meters.

    Parameters
    ----------
    width : float
        Length of the rack's long axis (the face you walk along).
    depth : float
        Length of the short axis, front to back.
    height : float
        Vertical size. Carried for completeness; the top-down projection
        never reads it.

    Raises
    ------
    ValueError
        If ``width`` or ``depth`` is not a positive finite number, or
        ``height`` is negative.
    """

    width: float
    depth: float
    height: float = 0.0

    def __post_init__(self) -> None:
        for name in ("width", "depth"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"Dimension.{name} must be a positive finite number, got {value!r}")
        if not math.isfinite(self.height) or self.height < 0:
            raise ValueError(f"Dimension.height must be >= 0, got {self.height!r}")

    @classmethod
    def from_feet(cls, width: float, depth: float, height: float = 0.0) -> "Dimension":
        """Build a dimension from foot-based measurements."""
        return cls(width=feet(width), depth=feet(depth), height=feet(height))


# Standard warehouse rack: 4 ft wide, 1.5 ft deep, 7 ft tall.
RACK_DIMENSIONS = Dimension.from_feet(width=4, depth=1.5, height=7)

__all__ = ["UNIT", "Dimension", "RACK_DIMENSIONS", "feet"]
