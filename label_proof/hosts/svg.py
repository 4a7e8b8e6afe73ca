"""
SVG drawing host.

Keeps the document in memory (MemoryDrawingHost) and writes it with
svgwrite. Also reads simple SVG dielines (rect, circle, ellipse,
polygon, polyline) for Upload mode and measures SVG legends.

Coordinates: document points with y up; the SVG viewBox is the artboard
with y flipped, one user unit per point.
"""

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import svgwrite
from numpy.typing import NDArray

from label_proof.config import CMYK
from label_proof.errors import HostOperationFailure
from label_proof.geometry.rect import Rectangle
from label_proof.geometry.shapes import ellipse_points, rectangle_points
from label_proof.hosts.base import SpotColor
from label_proof.hosts.memory import Item, MemoryDrawingHost

logger = logging.getLogger(__name__)

ARROW_SCALES = {"50%": 0.5, "75%": 0.75}
ARROW_BASE_SIZE = 8.0
# Baseline drop for vertically centered text (cap height ~0.7 em).
TEXT_BASELINE_SHIFT = 0.35
# Files this host can open as a dieline.
OPENABLE_PATTERNS = ("*.svg",)

_NUMBER = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')


def cmyk_to_hex(cmyk: CMYK) -> str:
    """Approximate screen color for a CMYK build (percent)."""
    c, m, y, k = (v / 100.0 for v in cmyk)
    r = round(255 * (1 - c) * (1 - k))
    g = round(255 * (1 - m) * (1 - k))
    b = round(255 * (1 - y) * (1 - k))
    return f"#{r:02x}{g:02x}{b:02x}"


def _paint(color: Optional[SpotColor]) -> str:
    return cmyk_to_hex(color.cmyk) if color is not None else 'none'


def _svg_id(name: str) -> str:
    return re.sub(r'[^A-Za-z0-9_-]+', '-', name).strip('-') or 'item'


def _length(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    match = _NUMBER.match(value.strip())
    return float(match.group()) if match else None


def _numbers(value: Optional[str]) -> List[float]:
    return [float(v) for v in _NUMBER.findall(value or '')]


def _attr(element: ET.Element, name: str) -> float:
    return _length(element.get(name)) or 0.0


class SvgDrawingHost(MemoryDrawingHost):
    """MemoryDrawingHost that reads and writes SVG files."""

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @staticmethod
    def read_svg(path: Union[str, Path]) -> Tuple[Rectangle, List[NDArray]]:
        """Artboard and closed outlines of an SVG file (y flipped to point up).

        Raises:
            HostOperationFailure: if the file cannot be parsed.
        """
        path = Path(path)
        try:
            root = ET.parse(path).getroot()
        except (ET.ParseError, OSError) as e:
            raise HostOperationFailure(f"Error opening file: {path} ({e})", object_name=str(path)) from e

        view_box = _numbers(root.get('viewBox'))
        if len(view_box) == 4:
            min_x, min_y, width, height = view_box
        else:
            min_x, min_y = 0.0, 0.0
            width = _length(root.get('width')) or 0.0
            height = _length(root.get('height')) or 0.0

        def flip(x: float, y: float) -> Tuple[float, float]:
            return (x - min_x, height - (y - min_y))

        outlines = []
        for element in root.iter():
            tag = element.tag.rsplit('}', 1)[-1]
            if tag == 'rect':
                x, y = flip(_attr(element, 'x'), _attr(element, 'y'))
                outlines.append(rectangle_points(x, y, _attr(element, 'width'), _attr(element, 'height')))
            elif tag == 'circle':
                r = _attr(element, 'r')
                x, y = flip(_attr(element, 'cx') - r, _attr(element, 'cy') - r)
                outlines.append(ellipse_points(x, y, 2 * r, 2 * r))
            elif tag == 'ellipse':
                rx, ry = _attr(element, 'rx'), _attr(element, 'ry')
                x, y = flip(_attr(element, 'cx') - rx, _attr(element, 'cy') - ry)
                outlines.append(ellipse_points(x, y, 2 * rx, 2 * ry))
            elif tag in ('polygon', 'polyline'):
                coords = _numbers(element.get('points'))
                if len(coords) >= 6:
                    pairs = np.array(coords[:len(coords) // 2 * 2]).reshape(-1, 2)
                    outlines.append(np.array([flip(x, y) for x, y in pairs]))

        if width <= 0 or height <= 0:
            if not outlines:
                raise HostOperationFailure(f"No artwork in {path}", object_name=str(path))
            artboard = Rectangle.from_points(np.vstack(outlines))
        else:
            artboard = Rectangle(0.0, height, width, 0.0)
        return artboard, outlines

    def load_outlines(self, path: Path) -> Tuple[Rectangle, List[NDArray]]:
        if path.suffix.lower() != '.svg':
            return super().load_outlines(path)
        artboard, outlines = self.read_svg(path)
        if not outlines:
            raise HostOperationFailure(f"No artwork in {path}", object_name=str(path))
        return artboard, outlines

    def probe_artwork_size(self, path: Path) -> Tuple[float, float]:
        if path.suffix.lower() == '.svg':
            artboard, _ = self.read_svg(path)
            return (artboard.width, artboard.height)
        return super().probe_artwork_size(path)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def save(self, path: Union[str, Path]) -> Path:
        """Write the document to an SVG file."""
        path = Path(path)
        board = self.artboard()

        def to_svg(points: NDArray) -> List[Tuple[float, float]]:
            return [(round(x - board.left, 4), round(board.top - y, 4)) for x, y in points]

        dwg = svgwrite.Drawing(
            str(path),
            size=(f"{board.width}pt", f"{board.height}pt"),
            viewBox=f"0 0 {board.width} {board.height}",
            debug=False,
        )
        self._markers: Dict[Tuple[str, str], svgwrite.container.Marker] = {}

        for layer in reversed(self.layers):
            group = dwg.g(id=_svg_id(layer.name))
            group['data-layer'] = layer.name
            if layer.locked:
                group['data-locked'] = 'true'
            for item_id in reversed(layer.items):
                group.add(self._render_item(dwg, self.items[item_id], to_svg))
            dwg.add(group)

        path.parent.mkdir(parents=True, exist_ok=True)
        dwg.save()
        logger.info("SVG proof saved: %s", path)
        return path

    def _render_item(self, dwg: svgwrite.Drawing, item: Item, to_svg):
        if item.kind == 'group':
            group = dwg.g(id=_svg_id(item.name))
            for child_id in item.children:
                group.add(self._render_item(dwg, self.items[child_id], to_svg))
            return group
        if item.kind == 'text':
            return self._render_text(dwg, item, to_svg)
        if item.kind == 'placed':
            return self._render_placed(dwg, item, to_svg)
        return self._render_path(dwg, item, to_svg)

    def _render_path(self, dwg: svgwrite.Drawing, item: Item, to_svg):
        points = to_svg(item.points)
        attrs = {
            'stroke': _paint(item.stroke_color) if item.stroke_width else 'none',
            'stroke_width': item.stroke_width or 0,
            'fill': _paint(item.fill_color),
        }
        if item.stroke_width and item.stroke_color is None:
            attrs['stroke'] = 'black'
        shape = dwg.polygon(points, **attrs) if item.closed else dwg.polyline(points, **attrs)
        if item.name:
            shape['id'] = _svg_id(item.name)
        if item.dashes:
            shape.dasharray(list(item.dashes))
        if item.arrowheads:
            marker = self._arrow_marker(dwg, item.arrowheads, attrs["stroke"])
            ref = f"#{marker['id']}"
            shape.set_markers((ref, False, ref))
        return shape

    def _arrow_marker(self, dwg: svgwrite.Drawing, action: str, paint: str):
        key = (action, paint)
        if key not in self._markers:
            size = ARROW_BASE_SIZE * ARROW_SCALES.get(action, 1.0)
            marker = dwg.marker(
                id=f"arrow-{len(self._markers) + 1}",
                insert=(size, size / 2),
                size=(size, size),
                orient='auto-start-reverse',
            )
            marker['markerUnits'] = 'userSpaceOnUse'
            marker.add(dwg.path(d=f"M0,0 L{size},{size / 2} L0,{size} Z", fill=paint, stroke='none'))
            dwg.defs.add(marker)
            self._markers[key] = marker
        return self._markers[key]

    def _render_text(self, dwg: svgwrite.Drawing, item: Item, to_svg):
        box = Rectangle.from_points(np.array(to_svg(item.points)))
        cx = (box.left + box.right) / 2
        cy = (box.top + box.bottom) / 2
        text = dwg.text(
            item.text,
            insert=(round(cx, 4), round(cy + item.font_size * TEXT_BASELINE_SHIFT, 4)),
            font_family=item.font_name,
            font_size=item.font_size,
            text_anchor='middle',
            fill=_paint(item.fill_color) if item.fill_color else 'black',
        )
        if item.rotation % 360:
            text['transform'] = f"rotate({-item.rotation:.2f},{cx:.4f},{cy:.4f})"
        return text

    def _render_placed(self, dwg: svgwrite.Drawing, item: Item, to_svg):
        # smallest y is the top edge in svg space
        box = Rectangle.from_points(np.array(to_svg(item.points)))
        return dwg.image(
            href=item.file.resolve().as_uri(),
            insert=(round(box.left, 4), round(box.bottom, 4)),
            size=(round(box.width, 4), round(box.height, 4)),
        )
