"""
White backer rectangle layout.

The backer is the dieline's bounding box scaled per axis by a factor
read off a piecewise-linear curve of the label dimension (inches), and
centered on the dieline. Small labels get a proportionally wider margin.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from label_proof.geometry.rect import Rectangle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScaleCurvePoint:
    inches: float
    factor: float


SCALE_CURVE_POINTS: Tuple[ScaleCurvePoint, ...] = (
    ScaleCurvePoint(1, 2.75),
    ScaleCurvePoint(2, 1.875),
    ScaleCurvePoint(3, 1.6),
    ScaleCurvePoint(4, 1.5),
    ScaleCurvePoint(5, 1.4),
    ScaleCurvePoint(6, 1.33),
    ScaleCurvePoint(7, 1.285),
    ScaleCurvePoint(8, 1.25),
    ScaleCurvePoint(9, 1.25),
    ScaleCurvePoint(10, 1.225),
    ScaleCurvePoint(11, 1.2),
    ScaleCurvePoint(12, 1.1875),
)

# Values returned outside the curve. They do not match the end points of
# the curve (2.75 at 1", 1.1875 at 12"); existing proofs rely on them.
SCALE_AT_OR_BELOW_MIN = 2.5
SCALE_AT_OR_ABOVE_MAX = 1.2


def scale_for(dimension_in: float) -> float:
    """Backer scale factor for a label dimension in inches."""
    if dimension_in <= SCALE_CURVE_POINTS[0].inches:
        return SCALE_AT_OR_BELOW_MIN
    if dimension_in >= SCALE_CURVE_POINTS[-1].inches:
        return SCALE_AT_OR_ABOVE_MAX

    for p1, p2 in zip(SCALE_CURVE_POINTS, SCALE_CURVE_POINTS[1:]):
        if p1.inches <= dimension_in < p2.inches:
            if dimension_in == p1.inches:
                return p1.factor
            t = (dimension_in - p1.inches) / (p2.inches - p1.inches)
            return p1.factor + (p2.factor - p1.factor) * t
    return SCALE_AT_OR_ABOVE_MAX


@dataclass(frozen=True)
class BackerRect:
    """Backer size (points) and center."""
    width_pts: float
    height_pts: float
    center_x: float
    center_y: float

    @property
    def bounds(self) -> Rectangle:
        return Rectangle.from_center(self.center_x, self.center_y, self.width_pts, self.height_pts)


def compute_backer(dieline: Rectangle, width_in: float, height_in: float) -> BackerRect:
    """Backer for a dieline with bounds ``dieline``.

    Args:
        dieline: dieline bounds (points).
        width_in: label width in inches, selects the horizontal factor.
        height_in: label height in inches, selects the vertical factor.
    """
    width_scale = scale_for(width_in)
    height_scale = scale_for(height_in)
    backer = BackerRect(
        width_pts=dieline.width * width_scale,
        height_pts=dieline.height * height_scale,
        center_x=dieline.center_x,
        center_y=dieline.center_y,
    )
    logger.debug(
        "Backer scale %.4f x %.4f -> %.2f x %.2f pt",
        width_scale, height_scale, backer.width_pts, backer.height_pts,
    )
    return backer

