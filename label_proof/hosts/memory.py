"""
In-memory drawing host.

Keeps a small vector document (layers, paths, text frames, groups,
placed artwork) as numpy point arrays and records every command issued
to it in ``commands``. Recorded actions are plain callables registered
by ``(action set, action name)``; see actions.py for the built-in ones.

Used directly in tests and as the document model behind SvgDrawingHost.
"""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from label_proof.config import (
    CMYK,
    LEGEND_DEFAULT_SIZE_PTS,
    TEXT_HEIGHT_RATIO,
    TEXT_WIDTH_RATIO,
)
from label_proof.errors import HostOperationFailure
from label_proof.geometry.rect import Point, Rectangle
from label_proof.geometry.units import inches_to_points
from label_proof.hosts.base import DrawingHost, Handle, SpotColor, ZOrder

logger = logging.getLogger(__name__)

MacroHandler = Callable[['MemoryDrawingHost'], None]

DEFAULT_LAYER_NAME = "Layer 1"


@dataclass
class Item:
    """A page item of the in-memory document."""
    id: int
    kind: str  # 'path' | 'text' | 'group' | 'placed'
    layer: str
    points: NDArray = field(default_factory=lambda: np.zeros((0, 2)))
    closed: bool = False
    name: str = ''
    stroke_width: Optional[float] = None
    stroke_color: Optional[SpotColor] = None
    dashes: Tuple[float, ...] = ()
    fill_color: Optional[SpotColor] = None
    text: str = ''
    font_name: str = ''
    font_size: float = 0.0
    rotation: float = 0.0
    arrowheads: Optional[str] = None
    file: Optional[Path] = None
    children: List[int] = field(default_factory=list)
    parent: Optional[int] = None

    @property
    def handle(self) -> Handle:
        return Handle(self.id, self.kind)


@dataclass
class Layer:
    name: str
    items: List[int] = field(default_factory=list)  # front-most first
    locked: bool = False


def _rotation_matrix(degrees: float) -> NDArray:
    rad = math.radians(degrees)
    c, s = round(math.cos(rad), 12), round(math.sin(rad), 12)
    return np.array([[c, s], [-s, c]])


class MemoryDrawingHost(DrawingHost):
    """DrawingHost backed by plain Python objects.

    Args:
        fonts: available font names (None: every font is available).
        documents: outlines served by ``open_document``, keyed by path.
        default_actions: register the built-in Offset/Add Arrows actions.
    """

    def __init__(
        self,
        fonts: Optional[Iterable[str]] = None,
        documents: Optional[Mapping[str, Sequence[Sequence[Point]]]] = None,
        default_actions: bool = True,
    ):
        self.fonts = set(fonts) if fonts is not None else None
        self.documents = {str(k): v for k, v in (documents or {}).items()}
        self.commands: List[tuple] = []
        self.macros: Dict[Tuple[str, str], MacroHandler] = {}
        self.title: Optional[str] = None
        self.spot_colors: Dict[str, SpotColor] = {}
        self.layers: List[Layer] = []
        self.items: Dict[int, Item] = {}
        self._artboard: Optional[Rectangle] = None
        self._selection: List[int] = []
        self._next_id = 1

        if default_actions:
            from label_proof.hosts.actions import register_default_actions
            register_default_actions(self)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _record(self, op: str, *args) -> None:
        self.commands.append((op,) + args)

    def _require_document(self) -> None:
        if self._artboard is None:
            raise HostOperationFailure("No document is open")

    def _layer(self, name: Optional[str]) -> Layer:
        self._require_document()
        if name is None:
            return self.layers[0]
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise HostOperationFailure(f"Layer '{name}' not found", object_name=name)

    def _writable_layer(self, name: Optional[str]) -> Layer:
        layer = self._layer(name)
        if layer.locked:
            raise HostOperationFailure(f"Layer '{layer.name}' is locked", object_name=layer.name)
        return layer

    def item(self, handle: Handle) -> Item:
        """Model object behind a handle."""
        try:
            return self.items[handle.id]
        except KeyError:
            raise HostOperationFailure(f"Item {handle.id} no longer exists") from None

    def _new_item(self, kind: str, layer: Layer, **attrs) -> Item:
        item = Item(id=self._next_id, kind=kind, layer=layer.name, **attrs)
        self._next_id += 1
        self.items[item.id] = item
        layer.items.insert(0, item.id)
        return item

    def _descendants(self, item: Item) -> List[Item]:
        result = [item]
        for child_id in item.children:
            result.extend(self._descendants(self.items[child_id]))
        return result

    def _all_points(self, item: Item) -> NDArray:
        arrays = [i.points for i in self._descendants(item) if i.kind != 'group' and len(i.points)]
        if not arrays:
            raise HostOperationFailure(f"Item {item.id} has no geometry")
        return np.vstack(arrays)

    def _transform(self, item: Item, fn: Callable[[NDArray], NDArray]) -> None:
        for node in self._descendants(item):
            if node.kind != 'group':
                node.points = fn(node.points)

    def _detach(self, item: Item) -> None:
        if item.parent is not None:
            self.items[item.parent].children.remove(item.id)
            item.parent = None
        else:
            self._layer(item.layer).items.remove(item.id)

    def item_points(self, handle: Handle) -> NDArray:
        return self.item(handle).points.copy()

    def set_arrowheads(self, handle: Handle, action: Optional[str]) -> None:
        self.item(handle).arrowheads = action

    def register_macro(self, set_name: str, name: str, handler: MacroHandler) -> None:
        """Register a recorded action."""
        self.macros[(set_name, name)] = handler

    def measure_text(self, content: str, font_size: float) -> Tuple[float, float]:
        """Estimated ``(width, height)`` of a single-line text frame."""
        return (len(content) * font_size * TEXT_WIDTH_RATIO, font_size * TEXT_HEIGHT_RATIO)

    def probe_artwork_size(self, path: Path) -> Tuple[float, float]:
        """Size (points) of artwork placed from ``path``."""
        return LEGEND_DEFAULT_SIZE_PTS

    def load_outlines(self, path: Path) -> Tuple[Rectangle, List[NDArray]]:
        """Artboard and closed outlines of a document to open."""
        outlines = self.documents.get(str(path))
        if outlines is None:
            raise HostOperationFailure(f"Error opening file: {path}", object_name=str(path))
        arrays = [np.asarray(o, dtype=float) for o in outlines]
        if not arrays:
            raise HostOperationFailure(f"No artwork in {path}", object_name=str(path))
        return Rectangle.from_points(np.vstack(arrays)), arrays

    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------

    def _reset(self, title: str, artboard: Rectangle) -> None:
        self.title = title
        self.spot_colors = {}
        self.layers = [Layer(DEFAULT_LAYER_NAME)]
        self.items = {}
        self._selection = []
        self._artboard = artboard

    def create_document(self, width_in: float, height_in: float, title: str) -> None:
        self._record("create_document", width_in, height_in, title)
        self._reset(title, Rectangle(0.0, inches_to_points(height_in), inches_to_points(width_in), 0.0))
        logger.debug("Created document '%s' %.4f x %.4f in", title, width_in, height_in)

    def open_document(self, path: Union[str, Path]) -> None:
        path = Path(path)
        self._record("open_document", str(path))
        artboard, outlines = self.load_outlines(path)
        self._reset(path.stem, artboard)
        layer = self.layers[0]
        for outline in outlines:
            self._new_item('path', layer, points=outline, closed=True, stroke_width=1.0)
        logger.debug("Opened %s with %d outlines", path, len(outlines))

    def artboard(self) -> Rectangle:
        self._require_document()
        return self._artboard

    def set_artboard(self, rect: Rectangle) -> None:
        self._require_document()
        self._record("set_artboard", rect.as_bounds())
        self._artboard = rect

    def create_spot_color(self, name: str, cmyk: CMYK) -> SpotColor:
        self._require_document()
        self._record("create_spot_color", name, tuple(cmyk))
        color = SpotColor(name, tuple(float(c) for c in cmyk))
        self.spot_colors[name] = color
        return color

    def redraw(self) -> None:
        self._record("redraw")

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def layer_names(self) -> List[str]:
        return [layer.name for layer in self.layers]

    def add_layer(self, name: str) -> str:
        self._require_document()
        self._record("add_layer", name)
        self.layers.insert(0, Layer(name))
        return name

    def rename_layer(self, old: str, new: str) -> None:
        self._record("rename_layer", old, new)
        layer = self._layer(old)
        layer.name = new
        for item_id in layer.items:
            for node in self._descendants(self.items[item_id]):
                node.layer = new

    def move_layer(self, name: str, method: ZOrder) -> None:
        self._record("move_layer", name, method.value)
        layer = self._layer(name)
        self.layers = _restack(self.layers, layer, method)

    def lock_layer(self, name: str, locked: bool = True) -> None:
        self._record("lock_layer", name, locked)
        self._layer(name).locked = locked

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_path(
        self,
        points: Sequence[Point],
        layer: Optional[str] = None,
        closed: bool = False,
    ) -> Handle:
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        if len(pts) < 2:
            raise HostOperationFailure("A path needs at least two points")
        target = self._writable_layer(layer)
        item = self._new_item('path', target, points=pts, closed=closed)
        self._record("add_path", item.id, target.name, closed)
        return item.handle

    def add_text(
        self,
        content: str,
        font_name: str,
        font_size: float,
        layer: Optional[str] = None,
    ) -> Handle:
        if self.fonts is not None and font_name not in self.fonts:
            raise HostOperationFailure(
                f"Font '{font_name}' not found. Please install it.",
                object_name=font_name,
            )
        target = self._writable_layer(layer)
        width, height = self.measure_text(content, font_size)
        box = np.array([[0.0, 0.0], [width, 0.0], [width, -height], [0.0, -height]])
        item = self._new_item(
            'text', target, points=box, closed=True,
            text=content, font_name=font_name, font_size=font_size,
        )
        self._record("add_text", item.id, content, font_name, font_size, target.name)
        return item.handle

    def set_stroke(
        self,
        handle: Handle,
        width: Optional[float] = None,
        color: Optional[SpotColor] = None,
        dashes: Optional[Sequence[float]] = None,
    ) -> None:
        item = self.item(handle)
        self._record("set_stroke", handle.id, width, color.name if color else None,
                     tuple(dashes) if dashes is not None else None)
        if width is not None:
            item.stroke_width = float(width)
        if color is not None:
            item.stroke_color = color
        if dashes is not None:
            item.dashes = tuple(float(d) for d in dashes)

    def set_fill(self, handle: Handle, color: Optional[SpotColor]) -> None:
        self._record("set_fill", handle.id, color.name if color else None)
        self.item(handle).fill_color = color

    def set_name(self, handle: Handle, name: str) -> None:
        self._record("set_name", handle.id, name)
        self.item(handle).name = name

    def item_name(self, handle: Handle) -> str:
        return self.item(handle).name

    def remove(self, handle: Handle) -> None:
        self._record("remove", handle.id)
        item = self.item(handle)
        self._detach(item)
        for node in self._descendants(item):
            self.items.pop(node.id, None)
            if node.id in self._selection:
                self._selection.remove(node.id)

    def place_file(self, path: Union[str, Path], layer: Optional[str] = None) -> Handle:
        path = Path(path)
        if not path.is_file():
            raise HostOperationFailure(f"Cannot place missing file {path}", object_name=str(path))
        target = self._writable_layer(layer)
        width, height = self.probe_artwork_size(path)
        board = self.artboard()
        rect = Rectangle.from_center(board.center_x, board.center_y, width, height)
        box = np.array([
            [rect.left, rect.top], [rect.right, rect.top],
            [rect.right, rect.bottom], [rect.left, rect.bottom],
        ])
        item = self._new_item('placed', target, points=box, closed=True, file=path)
        self._record("place_file", item.id, str(path), target.name)
        return item.handle

    # ------------------------------------------------------------------
    # Selection & actions
    # ------------------------------------------------------------------

    def select(self, handles: Sequence[Handle]) -> None:
        ids = [self.item(h).id for h in handles]
        self._record("select", tuple(ids))
        self._selection = ids

    def selection(self) -> List[Handle]:
        return [self.items[i].handle for i in self._selection if i in self.items]

    def run_named_macro(self, name: str, set_name: str) -> bool:
        self._record("run_named_macro", name, set_name)
        handler = self.macros.get((set_name, name))
        if handler is None:
            logger.debug("No action '%s' in set '%s'", name, set_name)
            return False
        handler(self)
        return True

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def measure_bounds(self, handle: Handle) -> Rectangle:
        return Rectangle.from_points(self._all_points(self.item(handle)))

    def translate(self, handle: Handle, dx: float, dy: float) -> None:
        self._record("translate", handle.id, dx, dy)
        offset = np.array([dx, dy])
        self._transform(self.item(handle), lambda pts: pts + offset)

    def rotate(self, handle: Handle, degrees: float) -> None:
        self._record("rotate", handle.id, degrees)
        item = self.item(handle)
        center = np.array(self.measure_bounds(handle).center)
        matrix = _rotation_matrix(degrees)
        self._transform(item, lambda pts: (pts - center) @ matrix + center)
        for node in self._descendants(item):
            node.rotation = (node.rotation + degrees) % 360

    def resize(self, handle: Handle, scale_x_pct: float, scale_y_pct: float) -> None:
        self._record("resize", handle.id, scale_x_pct, scale_y_pct)
        item = self.item(handle)
        center = np.array(self.measure_bounds(handle).center)
        factors = np.array([scale_x_pct, scale_y_pct]) / 100.0
        self._transform(item, lambda pts: (pts - center) * factors + center)
        for node in self._descendants(item):
            if node.kind == 'text':
                node.font_size *= factors[1]

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def group_and_name(
        self,
        handles: Sequence[Handle],
        name: str,
        layer: Optional[str] = None,
    ) -> Handle:
        members = [self.item(h) for h in handles]
        if not members:
            raise HostOperationFailure(f"Cannot create empty group '{name}'")
        target = self._writable_layer(layer or members[0].layer)
        group = self._new_item('group', target, name=name)
        for member in members:
            self._detach(member)
            member.parent = group.id
            group.children.append(member.id)
            for node in self._descendants(member):
                node.layer = target.name
        self._record("group_and_name", group.id, tuple(m.id for m in members), name, target.name)
        return group.handle

    def find_by_name(self, layer: str, name: str) -> Optional[Handle]:
        for item_id in self._layer(layer).items:
            if self.items[item_id].name == name:
                return self.items[item_id].handle
        return None

    def page_items(self, layer: str) -> List[Handle]:
        return [self.items[i].handle for i in self._layer(layer).items]

    def path_items(self) -> List[Handle]:
        result = []
        for layer in self.layers:
            for item_id in layer.items:
                for node in self._descendants(self.items[item_id]):
                    if node.kind == 'path':
                        result.append(node.handle)
        return result

    def z_order(self, handle: Handle, method: ZOrder) -> None:
        self._record("z_order", handle.id, method.value)
        item = self.item(handle)
        if item.parent is not None:
            raise HostOperationFailure(f"Item {item.id} is inside a group")
        layer = self._layer(item.layer)
        layer.items = _restack(layer.items, item.id, method)


def _restack(stack: list, element, method: ZOrder) -> list:
    """Move ``element`` within a front-most-first list."""
    stack = list(stack)
    index = stack.index(element)
    stack.pop(index)
    if method is ZOrder.BRING_TO_FRONT:
        stack.insert(0, element)
    elif method is ZOrder.SEND_TO_BACK:
        stack.append(element)
    elif method is ZOrder.BRING_FORWARD:
        stack.insert(max(0, index - 1), element)
    else:
        stack.insert(min(len(stack), index + 1), element)
    return stack
