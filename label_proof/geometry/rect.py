"""
Axis-aligned rectangles in document points (Cartesian, y grows upward).

Bounds follow the ``[left, top, right, bottom]`` order used by vector
editors for geometric bounds, so ``top > bottom`` for any real object.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rectangle:
    """Bounding box ``{left, top, right, bottom}`` in points.

    Attributes:
        left: minimum x.
        top: maximum y.
        right: maximum x.
        bottom: minimum y.
    """
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2

    @property
    def center(self) -> Point:
        return (self.center_x, self.center_y)

    @property
    def area(self) -> float:
        return self.width * self.height

    def is_valid(self) -> bool:
        """True when both width and height are positive."""
        return self.width > 0 and self.height > 0

    def translated(self, dx: float, dy: float) -> 'Rectangle':
        return Rectangle(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def as_bounds(self) -> Tuple[float, float, float, float]:
        """Return ``(left, top, right, bottom)``."""
        return (self.left, self.top, self.right, self.bottom)

    @classmethod
    def from_bounds(cls, bounds: Sequence[float]) -> 'Rectangle':
        """Build from a ``[left, top, right, bottom]`` sequence."""
        left, top, right, bottom = bounds
        return cls(float(left), float(top), float(right), float(bottom))

    @classmethod
    def from_center(cls, cx: float, cy: float, width: float, height: float) -> 'Rectangle':
        return cls(cx - width / 2, cy + height / 2, cx + width / 2, cy - height / 2)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> 'Rectangle':
        """Smallest rectangle enclosing ``points``.

        Raises:
            ValueError: if ``points`` is empty.
        """
        arr = np.asarray(list(points), dtype=float)
        if arr.size == 0:
            raise ValueError("Cannot bound an empty point set")
        xs, ys = arr[:, 0], arr[:, 1]
        return cls(float(xs.min()), float(ys.max()), float(xs.max()), float(ys.min()))

    @classmethod
    def union(cls, rects: Iterable['Rectangle']) -> 'Rectangle':
        rects = list(rects)
        if not rects:
            raise ValueError("Cannot union an empty list of rectangles")
        return cls(
            min(r.left for r in rects),
            max(r.top for r in rects),
            max(r.right for r in rects),
            min(r.bottom for r in rects),
        )
