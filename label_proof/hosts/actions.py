"""
Built-in stand-ins for the recorded actions the proof workflow runs.

Offset/<label type>
    On exactly one selected closed path (the dieline): adds an outward
    bleed path at the back of the layer, an inward safezone path and, for
    Die-cut, a backer path between the dieline and the bleed. Leaves
    the dieline and every new path selected. New paths are unnamed;
    naming them is the workflow's job.

Add Arrows/50%, Add Arrows/75%
    Marks arrowheads on every selected open path. Like the recorded
    action, it leaves the stroke at 1 pt with no color.
"""

import logging
from typing import TYPE_CHECKING, Callable

from label_proof.config import (
    ARROW_ACTION_SET,
    EMULATED_BACKER_INCHES,
    EMULATED_BLEED_INCHES,
    EMULATED_SAFEZONE_INCHES,
    LabelType,
    OFFSET_ACTION_SET,
)
from label_proof.errors import HostOperationFailure
from label_proof.geometry.shapes import offset_outline
from label_proof.geometry.units import inches_to_points
from label_proof.hosts.base import ZOrder

if TYPE_CHECKING:
    from label_proof.hosts.memory import MemoryDrawingHost

logger = logging.getLogger(__name__)

ARROW_ACTIONS = ("50%", "75%")
ARROW_RESIDUAL_STROKE = 1.0


def offset_action(label_type: LabelType) -> Callable[['MemoryDrawingHost'], None]:
    """Handler for ``Offset/<label_type>``."""
    bleed = inches_to_points(EMULATED_BLEED_INCHES[label_type])
    safezone = inches_to_points(EMULATED_SAFEZONE_INCHES)
    backer = inches_to_points(EMULATED_BACKER_INCHES)

    def run(host: 'MemoryDrawingHost') -> None:
        closed = [h for h in host.selection() if h.kind == 'path' and host.item(h).closed]
        if len(closed) != 1:
            raise HostOperationFailure(
                f"Offset action needs one selected closed path, got {len(closed)}",
                macro=label_type.value,
            )
        source = closed[0]
        points = host.item_points(source)
        layer = host.item(source).layer

        try:
            outlines = [offset_outline(points, bleed), offset_outline(points, -safezone)]
            if label_type is LabelType.DIE_CUT:
                outlines.append(offset_outline(points, backer))
        except ValueError as e:
            raise HostOperationFailure(str(e), macro=label_type.value) from e

        created = []
        for outline in outlines:
            handle = host.add_path(outline, layer=layer, closed=True)
            host.set_stroke(handle, width=1.0)
            created.append(handle)
        host.z_order(created[0], ZOrder.SEND_TO_BACK)
        host.select([source] + created)
        logger.debug("Offset/%s added %d paths", label_type.value, len(created))

    return run


def arrow_action(name: str) -> Callable[['MemoryDrawingHost'], None]:
    """Handler for ``Add Arrows/<name>``."""

    def run(host: 'MemoryDrawingHost') -> None:
        lines = [h for h in host.selection() if h.kind == 'path' and not host.item(h).closed]
        if not lines:
            raise HostOperationFailure("Arrow action needs a selected open path", macro=name)
        for handle in lines:
            host.set_arrowheads(handle, name)
            item = host.item(handle)
            item.stroke_width = ARROW_RESIDUAL_STROKE
            item.stroke_color = None

    return run


def register_default_actions(host: 'MemoryDrawingHost') -> None:
    """Register every built-in action on ``host``."""
    for label_type in LabelType:
        host.register_macro(OFFSET_ACTION_SET, label_type.value, offset_action(label_type))
    for name in ARROW_ACTIONS:
        host.register_macro(ARROW_ACTION_SET, name, arrow_action(name))
