"""
Unit tests for label_proof.geometry.

Tests:
- Inch/point conversion
- Rectangle properties and constructors
- Size bucket classification and its threshold tie-break
- Dieline shape outlines and offsets
"""

import numpy as np
import pytest

from label_proof.config import ShapeType
from label_proof.geometry.rect import Rectangle
from label_proof.geometry.shapes import (
    ellipse_points,
    label_shape_points,
    offset_outline,
    rectangle_points,
    rounded_rectangle_points,
)
from label_proof.geometry.sizing import SizeBucket, classify_size
from label_proof.geometry.units import inches_to_points, points_to_inches


class TestUnits:
    """Tests for inch/point conversion."""

    def test_inches_to_points(self):
        """One inch is 72 points."""
        assert inches_to_points(1) == 72
        assert inches_to_points(0.0625) == 4.5

    def test_points_to_inches(self):
        assert points_to_inches(288) == 4.0
        assert points_to_inches(0) == 0.0

    def test_round_trip(self):
        for value in (0.1, 1.25, 3.0, 11.875):
            assert points_to_inches(inches_to_points(value)) == pytest.approx(value)


class TestRectangle:
    """Tests for the Rectangle value type."""

    def test_dimensions(self, four_by_six):
        assert four_by_six.width == 288
        assert four_by_six.height == 432
        assert four_by_six.center == (144, 216)
        assert four_by_six.area == 288 * 432

    def test_is_valid(self):
        assert Rectangle(0, 10, 10, 0).is_valid()
        assert not Rectangle(0, 0, 10, 0).is_valid()
        assert not Rectangle(10, 10, 0, 0).is_valid()

    def test_from_bounds(self):
        rect = Rectangle.from_bounds([1, 5, 4, 2])
        assert rect.as_bounds() == (1.0, 5.0, 4.0, 2.0)

    def test_from_center(self):
        rect = Rectangle.from_center(10, 20, 4, 6)
        assert rect.as_bounds() == (8, 23, 12, 17)

    def test_from_points(self):
        rect = Rectangle.from_points([(1, 2), (5, -3), (0, 7)])
        assert rect.as_bounds() == (0, 7, 5, -3)

    def test_from_points_empty_raises(self):
        with pytest.raises(ValueError):
            Rectangle.from_points([])

    def test_translated(self):
        rect = Rectangle(0, 10, 10, 0).translated(5, -2)
        assert rect.as_bounds() == (5, 8, 15, -2)

    def test_union(self):
        rect = Rectangle.union([Rectangle(0, 10, 10, 0), Rectangle(-5, 3, 2, -1)])
        assert rect.as_bounds() == (-5, 10, 10, -1)


class TestClassifySize:
    """Tests for the size classifier."""

    @pytest.mark.parametrize("width, height, expected", [
        (0.25, 0.1, SizeBucket.UNDER_0_5),
        (0.75, 0.3, SizeBucket.FROM_0_5_TO_1),
        (1.5, 1.0, SizeBucket.FROM_1_TO_2),
        (3.0, 2.5, SizeBucket.FROM_2_TO_4),
        (4.5, 1.0, SizeBucket.FROM_4_TO_6),
        (8.0, 2.0, SizeBucket.FROM_6_TO_10),
        (12.0, 4.0, SizeBucket.OVER_10),
    ])
    def test_buckets(self, width, height, expected):
        assert classify_size(width, height) is expected

    def test_threshold_goes_to_higher_bucket(self):
        """A value exactly on a threshold belongs to the bucket above it."""
        assert classify_size(0.5, 0.5) is SizeBucket.FROM_0_5_TO_1
        assert classify_size(1.0, 0.2) is SizeBucket.FROM_1_TO_2
        assert classify_size(2.0, 2.0) is SizeBucket.FROM_2_TO_4
        assert classify_size(4.0, 6.0) is SizeBucket.FROM_6_TO_10
        assert classify_size(10.0, 1.0) is SizeBucket.OVER_10

    def test_largest_dimension_wins(self):
        assert classify_size(0.5, 10) is SizeBucket.OVER_10
        assert classify_size(10, 0.5) is SizeBucket.OVER_10

    def test_zero_size(self):
        assert classify_size(0, 0) is SizeBucket.UNDER_0_5

    def test_total(self):
        """Every non-negative size lands in exactly one bucket."""
        for value in np.linspace(0, 15, 301):
            assert isinstance(classify_size(float(value), 0.0), SizeBucket)


class TestShapes:
    """Tests for dieline outlines."""

    def test_rectangle_points(self):
        pts = rectangle_points(0, 144, 72, 144)
        assert pts.tolist() == [[0, 144], [72, 144], [72, 0], [0, 0]]

    def test_ellipse_bounds(self):
        rect = Rectangle.from_points(ellipse_points(0, 100, 200, 100))
        assert rect.left == pytest.approx(0)
        assert rect.right == pytest.approx(200)
        assert rect.top == pytest.approx(100)
        assert rect.bottom == pytest.approx(0)

    def test_rounded_rectangle_bounds(self):
        rect = Rectangle.from_points(rounded_rectangle_points(0, 72, 144, 72))
        assert rect.as_bounds() == pytest.approx((0, 72, 144, 0))

    def test_rounded_rectangle_cuts_corners(self):
        """No point of a rounded rectangle sits on a sharp corner."""
        pts = rounded_rectangle_points(0, 72, 144, 72, radius=9)
        corners = {(0.0, 72.0), (144.0, 72.0), (144.0, 0.0), (0.0, 0.0)}
        assert not any((round(x, 6), round(y, 6)) in corners for x, y in pts)

    @pytest.mark.parametrize("shape", list(ShapeType))
    def test_label_shape_anchored_at_origin(self, shape):
        rect = Rectangle.from_points(label_shape_points(shape, 288, 432))
        assert rect.as_bounds() == pytest.approx((0, 432, 288, 0))

    def test_offset_outward(self):
        grown = Rectangle.from_points(offset_outline(rectangle_points(0, 72, 72, 72), 4.5))
        assert grown.as_bounds() == pytest.approx((-4.5, 76.5, 76.5, -4.5))

    def test_offset_inward(self):
        shrunk = Rectangle.from_points(offset_outline(ellipse_points(0, 72, 72, 72), -4.5))
        assert shrunk.as_bounds() == pytest.approx((4.5, 67.5, 67.5, 4.5))

    def test_offset_collapse_raises(self):
        with pytest.raises(ValueError, match="collapses"):
            offset_outline(rectangle_points(0, 4, 4, 4), -2)
