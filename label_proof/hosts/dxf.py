"""
DXF export of a proof document.

Writes the cut and guide paths plus the dimension annotations of a
MemoryDrawingHost document with ezdxf, so the die maker gets the same
geometry as the proof. Units are inches.

Layer naming convention:
- DIELINE    - cut path
- BLEED      - bleed outline
- SAFEZONE   - safe area outline
- BACKER     - die-cut backer outline and white backer rectangle
- DIMENSIONS - dimension lines and text
- GUIDES     - any other path

Usage:
    from label_proof.hosts.dxf import DxfExporter

    exporter = DxfExporter()
    exporter.create_drawing(width_in=4, height_in=6)
    exporter.add_polyline([(0, 0), (4, 0), (4, 6)], layer='DIELINE')
    exporter.save('proof.dxf')
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple, Union

import ezdxf
from ezdxf import units
from ezdxf.enums import TextEntityAlignment

from label_proof.config import (
    BACKER_NAME,
    BLEED_NAME,
    DIELINE_NAME,
    HEIGHT_GROUP_NAME,
    SAFEZONE_NAME,
    WHITE_LAYER,
    WIDTH_GROUP_NAME,
)
from label_proof.geometry.rect import Rectangle
from label_proof.geometry.units import points_to_inches
from label_proof.hosts.memory import Item, MemoryDrawingHost

logger = logging.getLogger(__name__)

# ACI colors: 1 red, 3 green, 5 blue, 6 magenta, 7 white/black, 8 gray
PROOF_LAYERS = {
    'DIELINE': {'color': 6, 'linetype': 'CONTINUOUS', 'lineweight': 25},
    'BLEED': {'color': 5, 'linetype': 'CONTINUOUS', 'lineweight': 13},
    'SAFEZONE': {'color': 8, 'linetype': 'DASHED', 'lineweight': 13},
    'BACKER': {'color': 3, 'linetype': 'CONTINUOUS', 'lineweight': 13},
    'DIMENSIONS': {'color': 7, 'linetype': 'CONTINUOUS', 'lineweight': 18},
    'GUIDES': {'color': 1, 'linetype': 'CONTINUOUS', 'lineweight': 13},
}

NAME_TO_LAYER: Dict[str, str] = {
    DIELINE_NAME: 'DIELINE',
    BLEED_NAME: 'BLEED',
    SAFEZONE_NAME: 'SAFEZONE',
    BACKER_NAME: 'BACKER',
}

DIMENSION_GROUPS = (WIDTH_GROUP_NAME, HEIGHT_GROUP_NAME)


class DxfExporter:
    """DXF document builder using ezdxf."""

    def __init__(self):
        self.doc: Optional[ezdxf.document.Drawing] = None
        self.msp = None  # Modelspace

    def create_drawing(self, width_in: float, height_in: float, dxf_version: str = 'R2010') -> None:
        """Create a new DXF drawing with the proof layers."""
        self.doc = ezdxf.new(dxf_version, setup=True, units=units.IN)
        self.msp = self.doc.modelspace()
        for name, props in PROOF_LAYERS.items():
            self.doc.layers.add(
                name,
                color=props['color'],
                linetype=props['linetype'],
                lineweight=props['lineweight'],
            )
        logger.info("Created DXF drawing: %.4f x %.4f in", width_in, height_in)

    def _require_drawing(self) -> None:
        if self.msp is None:
            raise RuntimeError("Drawing not created. Call create_drawing() first.")

    def add_polyline(
        self,
        points: Sequence[Tuple[float, float]],
        closed: bool = False,
        layer: str = 'GUIDES',
    ) -> None:
        """Add a polyline (inches)."""
        self._require_drawing()
        if len(points) < 2:
            return
        self.msp.add_lwpolyline(points, close=closed, dxfattribs={'layer': layer})

    def add_text(
        self,
        text: str,
        center: Tuple[float, float],
        height: float,
        rotation: float = 0.0,
        layer: str = 'DIMENSIONS',
    ) -> None:
        """Add single-line text centered on ``center`` (inches)."""
        self._require_drawing()
        entity = self.msp.add_text(
            text,
            height=height,
            rotation=rotation,
            dxfattribs={'layer': layer},
        )
        entity.set_placement(center, align=TextEntityAlignment.MIDDLE_CENTER)

    def save(self, path: Union[str, Path]) -> Path:
        """Save drawing to a DXF file."""
        self._require_drawing()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.doc.saveas(str(path))
        logger.info("DXF saved: %s", path)
        return path


def _dxf_layer(item: Item, host_layer: str, in_dimension: bool) -> str:
    if in_dimension:
        return 'DIMENSIONS'
    if item.name in NAME_TO_LAYER:
        return NAME_TO_LAYER[item.name]
    if host_layer == WHITE_LAYER:
        return 'BACKER'
    return 'GUIDES'


def export_dxf(host: MemoryDrawingHost, path: Union[str, Path]) -> Path:
    """Write the paths and dimension text of ``host``'s document to DXF.

    Placed artwork (legends) has no vector geometry here and is skipped.
    """
    board = host.artboard()
    exporter = DxfExporter()
    exporter.create_drawing(points_to_inches(board.width), points_to_inches(board.height))

    def to_inches(points) -> list:
        return [(points_to_inches(x - board.left), points_to_inches(y - board.bottom)) for x, y in points]

    def visit(item: Item, host_layer: str, in_dimension: bool) -> None:
        if item.kind == 'group':
            nested = in_dimension or item.name in DIMENSION_GROUPS
            for child_id in item.children:
                visit(host.items[child_id], host_layer, nested)
        elif item.kind == 'path':
            exporter.add_polyline(
                to_inches(item.points),
                closed=item.closed,
                layer=_dxf_layer(item, host_layer, in_dimension),
            )
        elif item.kind == 'text':
            box = Rectangle.from_points(item.points)
            cx, cy = to_inches([box.center])[0]
            exporter.add_text(item.text, (cx, cy), points_to_inches(item.font_size), item.rotation)

    for layer in reversed(host.layers):
        for item_id in reversed(layer.items):
            visit(host.items[item_id], layer.name, False)

    return exporter.save(path)
