"""
Drawing host capability interface.

The workflow never touches a vector editor directly; it issues commands
through DrawingHost. Implementations:
  - MemoryDrawingHost (memory.py): in-memory document, records commands
  - SvgDrawingHost    (svg.py):    memory document rendered with svgwrite

Coordinates are points with y growing upward. Layers are addressed by
name; page items by opaque Handle values returned from the host.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from label_proof.config import CMYK, MACRO_ATTEMPTS, MACRO_RETRY_DELAY_S
from label_proof.errors import HostOperationFailure
from label_proof.geometry.rect import Point, Rectangle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Handle:
    """Reference to a page item owned by a host."""
    id: int
    kind: str


@dataclass(frozen=True)
class SpotColor:
    """Named spot swatch with its CMYK build (percent)."""
    name: str
    cmyk: CMYK


class ZOrder(Enum):
    BRING_TO_FRONT = "bring_to_front"
    BRING_FORWARD = "bring_forward"
    SEND_BACKWARD = "send_backward"
    SEND_TO_BACK = "send_to_back"


class DrawingHost(ABC):
    """Commands the proof workflow needs from a vector editor."""

    # --- document ---------------------------------------------------------

    @abstractmethod
    def create_document(self, width_in: float, height_in: float, title: str) -> None:
        """Create a document whose artboard is ``[0, h, w, 0]`` points."""

    @abstractmethod
    def open_document(self, path: Union[str, Path]) -> None:
        """Open existing dieline artwork."""

    @abstractmethod
    def artboard(self) -> Rectangle:
        """Current artboard rectangle."""

    @abstractmethod
    def set_artboard(self, rect: Rectangle) -> None:
        """Resize the artboard."""

    @abstractmethod
    def create_spot_color(self, name: str, cmyk: CMYK) -> SpotColor:
        """Add a spot swatch and return a color usable for stroke/fill."""

    @abstractmethod
    def redraw(self) -> None:
        """Flush pending drawing so later measurements are current."""

    # --- layers -----------------------------------------------------------

    @abstractmethod
    def layer_names(self) -> List[str]:
        """Layer names, top-most first."""

    @abstractmethod
    def add_layer(self, name: str) -> str:
        """Add a layer on top of the stack."""

    @abstractmethod
    def rename_layer(self, old: str, new: str) -> None:
        """Rename a layer."""

    @abstractmethod
    def move_layer(self, name: str, method: ZOrder) -> None:
        """Restack a layer."""

    @abstractmethod
    def lock_layer(self, name: str, locked: bool = True) -> None:
        """Lock or unlock a layer."""

    # --- items ------------------------------------------------------------

    @abstractmethod
    def add_path(
        self,
        points: Sequence[Point],
        layer: Optional[str] = None,
        closed: bool = False,
    ) -> Handle:
        """Add a path through ``points`` on ``layer`` (default: top layer)."""

    @abstractmethod
    def add_text(
        self,
        content: str,
        font_name: str,
        font_size: float,
        layer: Optional[str] = None,
    ) -> Handle:
        """Add a point-text frame.

        Raises:
            HostOperationFailure: if the font is not available.
        """

    @abstractmethod
    def set_stroke(
        self,
        handle: Handle,
        width: Optional[float] = None,
        color: Optional[SpotColor] = None,
        dashes: Optional[Sequence[float]] = None,
    ) -> None:
        """Stroke an item; ``None`` arguments keep the current value."""

    @abstractmethod
    def set_fill(self, handle: Handle, color: Optional[SpotColor]) -> None:
        """Fill an item (``None`` removes the fill)."""

    @abstractmethod
    def set_name(self, handle: Handle, name: str) -> None:
        """Name an item."""

    @abstractmethod
    def item_name(self, handle: Handle) -> str:
        """Name of an item ('' when unnamed)."""

    @abstractmethod
    def remove(self, handle: Handle) -> None:
        """Delete an item."""

    @abstractmethod
    def place_file(self, path: Union[str, Path], layer: Optional[str] = None) -> Handle:
        """Place external artwork."""

    # --- selection & actions ----------------------------------------------

    @abstractmethod
    def select(self, handles: Sequence[Handle]) -> None:
        """Replace the selection."""

    @abstractmethod
    def selection(self) -> List[Handle]:
        """Current selection."""

    def clear_selection(self) -> None:
        self.select([])

    @abstractmethod
    def run_named_macro(self, name: str, set_name: str) -> bool:
        """Run a recorded action on the current selection.

        Returns:
            True if the action ran.
        """

    # --- geometry ---------------------------------------------------------

    @abstractmethod
    def measure_bounds(self, handle: Handle) -> Rectangle:
        """Geometric bounds of an item."""

    @abstractmethod
    def translate(self, handle: Handle, dx: float, dy: float) -> None:
        """Move an item."""

    @abstractmethod
    def rotate(self, handle: Handle, degrees: float) -> None:
        """Rotate an item counter-clockwise about its bounds center."""

    @abstractmethod
    def resize(self, handle: Handle, scale_x_pct: float, scale_y_pct: float) -> None:
        """Scale an item (percent) about its bounds center."""

    # --- structure --------------------------------------------------------

    @abstractmethod
    def group_and_name(
        self,
        handles: Sequence[Handle],
        name: str,
        layer: Optional[str] = None,
    ) -> Handle:
        """Group items and name the group."""

    @abstractmethod
    def find_by_name(self, layer: str, name: str) -> Optional[Handle]:
        """First item on ``layer`` called ``name``."""

    @abstractmethod
    def page_items(self, layer: str) -> List[Handle]:
        """Top-level items on a layer, front-most first."""

    @abstractmethod
    def path_items(self) -> List[Handle]:
        """All paths in the document (including grouped ones)."""

    @abstractmethod
    def z_order(self, handle: Handle, method: ZOrder) -> None:
        """Restack an item within its layer."""


# ---------------------------------------------------------------------------
# Recorded actions with bounded retry
# ---------------------------------------------------------------------------

def run_macro_with_retry(
    host: DrawingHost,
    name: str,
    set_name: str,
    attempts: int = MACRO_ATTEMPTS,
    delay: float = MACRO_RETRY_DELAY_S,
    sleep: Callable[[float], None] = time.sleep,
    step: Optional[str] = None,
) -> None:
    """Run a recorded action, retrying transient failures.

    A host that returns False or raises HostOperationFailure counts as a
    failed attempt. ``sleep`` is called with ``delay`` between attempts.

    Raises:
        HostOperationFailure: when every attempt failed.
    """
    last_error: Optional[HostOperationFailure] = None
    for attempt in range(1, attempts + 1):
        try:
            if host.run_named_macro(name, set_name):
                if attempt > 1:
                    logger.info("Action '%s' from '%s' ran on attempt %d", name, set_name, attempt)
                return
            last_error = None
        except HostOperationFailure as e:
            last_error = e
        logger.warning(
            "Action '%s' from '%s' failed (attempt %d/%d)",
            name, set_name, attempt, attempts,
            extra={"macro": name, "action_set": set_name},
        )
        if attempt < attempts:
            sleep(delay)

    detail = f": {last_error.message}" if last_error else ""
    raise HostOperationFailure(
        f'Could not run "{name}" action from "{set_name}" set after {attempts} attempts{detail}. '
        f'Make sure that action set and action exist.',
        step=step,
        macro=name,
    )
