"""
Outline point lists for the dieline shapes and their offsets.

Curves are sampled into polygons; the drawing hosts only deal with
straight segments.
"""

import math

import numpy as np
from numpy.typing import NDArray

from label_proof.config import ROUNDED_CORNER_RADIUS_PTS, ShapeType

ELLIPSE_SEGMENTS = 72
CORNER_SEGMENTS = 8


def rectangle_points(left: float, top: float, width: float, height: float) -> NDArray:
    """Corners of a rectangle, clockwise from the top-left."""
    return np.array([
        [left, top],
        [left + width, top],
        [left + width, top - height],
        [left, top - height],
    ], dtype=float)


def ellipse_points(
    left: float,
    top: float,
    width: float,
    height: float,
    segments: int = ELLIPSE_SEGMENTS,
) -> NDArray:
    """Ellipse inscribed in the given rectangle."""
    cx = left + width / 2
    cy = top - height / 2
    t = np.linspace(0.0, 2 * math.pi, segments, endpoint=False)
    return np.column_stack([cx + (width / 2) * np.cos(t), cy + (height / 2) * np.sin(t)])


def rounded_rectangle_points(
    left: float,
    top: float,
    width: float,
    height: float,
    radius: float = ROUNDED_CORNER_RADIUS_PTS,
    segments: int = CORNER_SEGMENTS,
) -> NDArray:
    """Rectangle with quarter-circle corners of ``radius`` points."""
    r = max(0.0, min(radius, width / 2, height / 2))
    if r == 0:
        return rectangle_points(left, top, width, height)

    right = left + width
    bottom = top - height
    # (corner center, start angle) counter-clockwise from the top-right corner
    corners = [
        ((right - r, top - r), 0.0),
        ((left + r, top - r), math.pi / 2),
        ((left + r, bottom + r), math.pi),
        ((right - r, bottom + r), 3 * math.pi / 2),
    ]
    arcs = []
    for (cx, cy), start in corners:
        t = np.linspace(start, start + math.pi / 2, segments + 1)
        arcs.append(np.column_stack([cx + r * np.cos(t), cy + r * np.sin(t)]))
    return np.vstack(arcs)


def label_shape_points(shape: ShapeType, width_pts: float, height_pts: float) -> NDArray:
    """Dieline outline anchored at the origin (top-left at ``(0, height)``)."""
    if shape is ShapeType.ROUND:
        return ellipse_points(0.0, height_pts, width_pts, height_pts)
    if shape is ShapeType.ROUNDED:
        return rounded_rectangle_points(0.0, height_pts, width_pts, height_pts)
    return rectangle_points(0.0, height_pts, width_pts, height_pts)


def offset_outline(points: NDArray, delta: float) -> NDArray:
    """Grow (``delta > 0``) or shrink an outline by ``delta`` on every side.

    Scales about the bounding-box center so the bounding box moves by
    exactly ``delta``; exact for rectangles and ellipses.

    Raises:
        ValueError: if shrinking would collapse the outline.
    """
    pts = np.asarray(points, dtype=float)
    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    size = maxs - mins
    new_size = size + 2 * delta
    if np.any(new_size <= 0) or np.any(size <= 0):
        raise ValueError(f"Offset {delta} collapses outline of size {size.tolist()}")
    center = (mins + maxs) / 2
    return center + (pts - center) * (new_size / size)
