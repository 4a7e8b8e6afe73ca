"""Inch/point conversion (Illustrator-style 72 pt per inch)."""

from label_proof.config import INCH_TO_POINTS


def inches_to_points(inches: float) -> float:
    """Convert inches to points."""
    return inches * INCH_TO_POINTS


def points_to_inches(points: float) -> float:
    """Convert points to inches."""
    return points / INCH_TO_POINTS
