"""
Width/height dimension layout for a label outline.

Pure computation: from an object's bounds and label type produce where
the two dimension lines go, what their labels say and where the labels
sit. The drawing host realizes the layout (renderer.py).

Conventions (points, y up):
  - Width dimension: horizontal line above the object at
    ``top + line_offset``, spanning ``[left, right]``; text centered
    above it with its bottom ``text_offset`` above the line.
  - Height dimension: vertical line left of the object at
    ``left - line_offset``, spanning ``[bottom, top]``; text rotated 90°,
    its right edge ``text_offset`` left of the line, centered on midY.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from label_proof.config import (
    ARROW_ACTION_SET,
    DIMENSION_COLOR_NAME,
    HEIGHT_GROUP_NAME,
    LabelType,
    WIDTH_GROUP_NAME,
)
from label_proof.drawing.dimensions.formatting import format_dimension
from label_proof.drawing.dimensions.table import DimensionStyle, OffsetTable, lookup_style
from label_proof.geometry.rect import Point, Rectangle
from label_proof.geometry.sizing import SizeBucket, classify_size
from label_proof.geometry.units import inches_to_points, points_to_inches

logger = logging.getLogger(__name__)

HEIGHT_TEXT_ROTATION = 90.0


@dataclass(frozen=True)
class DimensionLineSpec:
    """Dimension line segment plus the arrowhead action for its ends."""
    start: Point
    end: Point
    stroke_width: float
    color: str
    arrow_action: str
    arrow_set: str = ARROW_ACTION_SET

    @property
    def length(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])


@dataclass(frozen=True)
class DimensionTextSpec:
    """Dimension label.

    Unrotated text sits with its bottom-center on ``anchor``. Rotated
    text is re-measured after the rotation and moved so that its edge
    nearest the line is ``offset_pts`` away from ``anchor[0]`` and its
    box is vertically centered on ``anchor[1]``.
    """
    text: str
    font_size: float
    anchor: Point
    rotation: float
    color: str
    offset_pts: float = 0.0


@dataclass(frozen=True)
class DimensionSpec:
    """One named line + text unit ("Width" or "Height")."""
    name: str
    line: DimensionLineSpec
    text: DimensionTextSpec


@dataclass(frozen=True)
class DimensionLayout:
    """Complete layout for one object."""
    target: Rectangle
    width_in: float
    height_in: float
    bucket: SizeBucket
    style: DimensionStyle
    width: DimensionSpec
    height: DimensionSpec


def compute_dimension_layout(
    target: Rectangle,
    label_type: Union[LabelType, str],
    color: str = DIMENSION_COLOR_NAME,
    table: Optional[OffsetTable] = None,
    arrow_set: str = ARROW_ACTION_SET,
) -> DimensionLayout:
    """Lay out width and height dimensions for ``target``.

    Args:
        target: bounds of the dimensioned object (points).
        label_type: label type selecting the offset table row.
        color: spot color name for lines and text.
        table: alternative offset table.
        arrow_set: action set holding the arrowhead actions.

    Raises:
        ValueError: if ``target`` has no positive width and height.
        ConfigurationError: if the offset table has no matching entry.
    """
    if not target.is_valid():
        raise ValueError(f"Cannot dimension an object with bounds {target.as_bounds()}")

    w_in = points_to_inches(target.width)
    h_in = points_to_inches(target.height)
    bucket = classify_size(w_in, h_in)
    style = lookup_style(label_type, bucket, table)

    line_offset = inches_to_points(style.line_offset_in)
    text_offset = inches_to_points(style.text_offset_in)

    line_y = target.top + line_offset
    width_dim = DimensionSpec(
        name=WIDTH_GROUP_NAME,
        line=DimensionLineSpec(
            start=(target.left, line_y),
            end=(target.right, line_y),
            stroke_width=style.stroke_width,
            color=color,
            arrow_action=style.arrow_action,
            arrow_set=arrow_set,
        ),
        text=DimensionTextSpec(
            text=format_dimension(w_in),
            font_size=style.font_size,
            anchor=(target.center_x, line_y + text_offset),
            rotation=0.0,
            color=color,
        ),
    )

    line_x = target.left - line_offset
    height_dim = DimensionSpec(
        name=HEIGHT_GROUP_NAME,
        line=DimensionLineSpec(
            start=(line_x, target.top),
            end=(line_x, target.bottom),
            stroke_width=style.stroke_width,
            color=color,
            arrow_action=style.arrow_action,
            arrow_set=arrow_set,
        ),
        text=DimensionTextSpec(
            text=format_dimension(h_in),
            font_size=style.font_size,
            anchor=(line_x, target.center_y),
            rotation=HEIGHT_TEXT_ROTATION,
            color=color,
            offset_pts=text_offset,
        ),
    )

    logger.debug(
        "Dimension layout %.4f x %.4f in, bucket %s",
        w_in, h_in, bucket.value,
    )
    return DimensionLayout(
        target=target,
        width_in=w_in,
        height_in=h_in,
        bucket=bucket,
        style=style,
        width=width_dim,
        height=height_dim,
    )


# ---------------------------------------------------------------------------
# Text placement
# ---------------------------------------------------------------------------

def bottom_center_shift(bounds: Rectangle, anchor: Point) -> Tuple[float, float]:
    """Translation putting the bottom-center of ``bounds`` on ``anchor``."""
    return (anchor[0] - bounds.center_x, anchor[1] - bounds.bottom)


def rotate_bounds(bounds: Rectangle, degrees: float) -> Rectangle:
    """Bounds of ``bounds`` after rotating it about its own center."""
    rad = math.radians(degrees)
    c, s = round(math.cos(rad), 12), round(math.sin(rad), 12)
    corners = np.array([
        [bounds.left, bounds.top],
        [bounds.right, bounds.top],
        [bounds.right, bounds.bottom],
        [bounds.left, bounds.bottom],
    ])
    center = np.array(bounds.center)
    rotated = (corners - center) @ np.array([[c, s], [-s, c]]) + center
    return Rectangle.from_points(rotated)


def rotated_text_shift(
    rotated: Rectangle,
    line_x: float,
    mid_y: float,
    offset_pts: float,
) -> Tuple[float, float]:
    """Translation for rotated height text measured at ``rotated``.

    Puts the right edge ``offset_pts`` left of the dimension line and
    centers the box vertically on ``mid_y``.
    """
    return (line_x - offset_pts - rotated.right, mid_y - rotated.center_y)


def predict_text_bounds(spec: DimensionTextSpec, text_width: float, text_height: float) -> Rectangle:
    """Final bounds of a label whose unrotated box is ``text_width x text_height``.

    Mirrors what the renderer does on a host (place, rotate, re-measure,
    translate) without a host.
    """
    box = Rectangle(0.0, text_height, text_width, 0.0)
    box = box.translated(*bottom_center_shift(box, spec.anchor))
    if not spec.rotation:
        return box
    box = rotate_bounds(box, spec.rotation)
    return box.translated(*rotated_text_shift(box, spec.anchor[0], spec.anchor[1], spec.offset_pts))
