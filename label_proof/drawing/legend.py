"""
Legend artwork: file lookup, fitting and placement.

The legend sits under the label, between the bottom of the white backer
and the bottom of the bleed. It is scaled uniformly to fit in a third
of that gap and in 80% of the backer width, then centered horizontally
on the backer and vertically in the gap.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from label_proof.config import (
    LEGEND_EXTENSION,
    LEGEND_MAX_HEIGHT_FRACTION,
    LEGEND_MAX_WIDTH_FRACTION,
    LEGEND_PREFIX,
    LEGENDS_NAME,
    LabelType,
)
from label_proof.errors import AssetMissing
from label_proof.geometry.rect import Point, Rectangle
from label_proof.hosts.base import DrawingHost, Handle

logger = logging.getLogger(__name__)


def legend_file_name(
    label_type: Union[LabelType, str],
    material: Optional[str] = None,
    white_ink: bool = False,
) -> str:
    """Legend file for a proof, e.g. ``SZ-CL-Backer-Clear-WhiteInk.ai``."""
    parts = [LEGEND_PREFIX]
    if LabelType.parse(label_type) is LabelType.DIE_CUT:
        parts.append("Backer")
    if material:
        parts.append(material)
    if white_ink:
        parts.append("WhiteInk")
    return "-".join(parts) + LEGEND_EXTENSION


def resolve_legend(legends_dir: Union[str, Path], file_name: str) -> Path:
    """Path of a legend file.

    Raises:
        AssetMissing: if the file does not exist.
    """
    path = Path(legends_dir) / file_name
    if not path.is_file():
        raise AssetMissing(path, step="legend")
    return path


def legend_scale_percent(legend: Rectangle, backer: Rectangle, bleed_bottom: float) -> float:
    """Uniform scale (percent) fitting ``legend`` under the backer.

    Returns 100 when either constraint has no positive span.
    """
    gap = abs(backer.bottom - bleed_bottom)
    max_height = gap * LEGEND_MAX_HEIGHT_FRACTION
    target_width = backer.width * LEGEND_MAX_WIDTH_FRACTION

    if legend.height <= 0 or legend.width <= 0 or max_height <= 0 or target_width <= 0:
        return 100.0
    return min(max_height / legend.height, target_width / legend.width) * 100.0


def legend_target_center(backer: Rectangle, bleed_bottom: float) -> Point:
    """Where the legend's center goes."""
    return (backer.center_x, (backer.bottom + bleed_bottom) / 2)


def place_legend(
    host: DrawingHost,
    path: Union[str, Path],
    backer: Rectangle,
    bleed_bottom: float,
    layer: Optional[str] = None,
) -> Tuple[Handle, float]:
    """Place, fit and center a legend; returns its ``Legends`` group and scale."""
    placed = host.place_file(path, layer=layer)
    scale = legend_scale_percent(host.measure_bounds(placed), backer, bleed_bottom)
    host.resize(placed, scale, scale)

    bounds = host.measure_bounds(placed)
    cx, cy = legend_target_center(backer, bleed_bottom)
    host.translate(placed, cx - bounds.center_x, cy - bounds.center_y)

    group = host.group_and_name([placed], LEGENDS_NAME, layer)
    logger.info("Placed legend %s at %.1f%%", Path(path).name, scale)
    return group, scale
