"""Units, rectangles, size buckets and outline geometry."""

from label_proof.geometry.rect import Point, Rectangle
from label_proof.geometry.sizing import SizeBucket, classify_size
from label_proof.geometry.units import inches_to_points, points_to_inches

__all__ = [
    "Point",
    "Rectangle",
    "SizeBucket",
    "classify_size",
    "inches_to_points",
    "points_to_inches",
]
