"""
Realize a DimensionLayout on a drawing host.

For each of the Width and Height dimensions:
  1. draw the line and stroke it,
  2. select it alone and run the arrowhead action (with retry),
  3. re-apply stroke width and color (the action may change them),
  4. add the text, put its bottom-center on the anchor,
  5. rotated text: rotate, redraw, re-measure and move it so its edge
     sits ``offset_pts`` from the line, centered on the line's middle,
  6. group line and text under the dimension's name.

The selection is cleared before and after every arrowhead action.
"""

import logging
import time
from typing import Callable, List, Optional

from label_proof.config import DIMENSION_FONT_NAME, MACRO_ATTEMPTS, MACRO_RETRY_DELAY_S
from label_proof.drawing.dimensions.layout import (
    DimensionLayout,
    DimensionSpec,
    bottom_center_shift,
    rotated_text_shift,
)
from label_proof.hosts.base import DrawingHost, Handle, SpotColor, run_macro_with_retry

logger = logging.getLogger(__name__)


class DimensionRenderer:
    """Draws dimension layouts through a DrawingHost.

    Args:
        host: drawing host.
        color: spot color for lines and text.
        font_name: dimension text font.
        attempts: arrow action attempts.
        delay: seconds between attempts.
        sleep: sleep function used between attempts.
    """

    def __init__(
        self,
        host: DrawingHost,
        color: SpotColor,
        font_name: str = DIMENSION_FONT_NAME,
        attempts: int = MACRO_ATTEMPTS,
        delay: float = MACRO_RETRY_DELAY_S,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.host = host
        self.color = color
        self.font_name = font_name
        self.attempts = attempts
        self.delay = delay
        self.sleep = sleep

    def draw(self, layout: DimensionLayout, layer: Optional[str] = None) -> List[Handle]:
        """Draw both dimensions; returns the Width and Height group handles."""
        return [self.draw_dimension(dim, layer) for dim in (layout.width, layout.height)]

    def draw_dimension(self, dim: DimensionSpec, layer: Optional[str] = None) -> Handle:
        line = self._draw_line(dim, layer)
        text = self._draw_text(dim, layer)
        group = self.host.group_and_name([line, text], dim.name, layer)
        logger.debug("Drew %s dimension '%s'", dim.name, dim.text.text)
        return group

    def _draw_line(self, dim: DimensionSpec, layer: Optional[str]) -> Handle:
        host = self.host
        spec = dim.line

        host.clear_selection()
        line = host.add_path([spec.start, spec.end], layer=layer, closed=False)
        host.set_stroke(line, width=spec.stroke_width, color=self.color)
        host.select([line])
        try:
            run_macro_with_retry(
                host, spec.arrow_action, spec.arrow_set,
                attempts=self.attempts, delay=self.delay, sleep=self.sleep,
                step="dimensions",
            )
        finally:
            host.clear_selection()
        host.set_stroke(line, width=spec.stroke_width, color=self.color)
        return line

    def _draw_text(self, dim: DimensionSpec, layer: Optional[str]) -> Handle:
        host = self.host
        spec = dim.text

        text = host.add_text(spec.text, self.font_name, spec.font_size, layer=layer)
        host.set_fill(text, self.color)
        host.translate(text, *bottom_center_shift(host.measure_bounds(text), spec.anchor))

        if spec.rotation:
            host.rotate(text, spec.rotation)
            host.redraw()
            rotated = host.measure_bounds(text)
            host.translate(text, *rotated_text_shift(rotated, spec.anchor[0], spec.anchor[1], spec.offset_pts))
        return text
