"""
Proof workflow: from a ProofRequest to a finished proof document.

Make mode:
    new document -> spot colors -> dieline shape -> offset action ->
    name Bleed/Safezone/Backer -> layers -> white backer, dimensions,
    legend (when guidelines are requested)

Upload mode:
    open artwork -> largest path becomes the dieline -> same as above

Every step runs inside log_timing. Failures before the guidelines stage
raise LabelProofError naming the step; already drawn artwork stays in
the document. In the guidelines stage a failed dimension or legend step
is recorded on the result and the remaining steps still run. A missing
legend file is only a warning.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from label_proof.config import (
    ART_LAYER,
    ARTBOARD_BLEED_INCHES,
    BACKER_NAME,
    BLEED_NAME,
    BLEEDLINE_COLOR_CMYK,
    BLEEDLINE_COLOR_NAME,
    CUT_TO_PART_COLOR_CMYK,
    CUT_TO_PART_COLOR_NAME,
    DIELINE_COLOR_CMYK,
    DIELINE_COLOR_NAME,
    DIELINE_NAME,
    DIELINE_STROKE_WIDTH,
    DIMENSION_COLOR_NAME,
    DOCUMENT_TITLE,
    GUIDES_LAYER,
    SAFEZONE_COLOR_CMYK,
    SAFEZONE_COLOR_NAME,
    SAFEZONE_DASHES,
    SAFEZONE_NAME,
    SAFEZONE_STROKE_WIDTH,
    WHITE_BACKER_COLOR_CMYK,
    WHITE_BACKER_COLOR_NAME,
    WHITE_LAYER,
    LabelType,
)
from label_proof.drawing.backer import BackerRect, compute_backer
from label_proof.drawing.dimensions.layout import DimensionLayout, compute_dimension_layout
from label_proof.drawing.dimensions.renderer import DimensionRenderer
from label_proof.drawing.legend import legend_file_name, place_legend, resolve_legend
from label_proof.errors import AssetMissing, HostOperationFailure, LabelProofError
from label_proof.geometry.rect import Rectangle
from label_proof.geometry.shapes import label_shape_points, rectangle_points
from label_proof.geometry.units import inches_to_points, points_to_inches
from label_proof.hosts.base import DrawingHost, Handle, SpotColor, ZOrder, run_macro_with_retry
from label_proof.logging_config import LogContext, log_timing
from label_proof.project_config import ProjectConfig
from label_proof.request import ProofMode, ProofRequest

logger = logging.getLogger(__name__)


@dataclass
class ProofResult:
    """Outcome of one workflow run."""
    request: ProofRequest
    width_in: float = 0.0
    height_in: float = 0.0
    completed: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)
    dieline: Optional[Rectangle] = None
    backer: Optional[BackerRect] = None
    dimensions: Optional[DimensionLayout] = None
    legend_scale: Optional[float] = None

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        lines = [
            f"{self.request.mode.value} proof, {self.request.label_type.value} "
            f"{self.width_in:g} x {self.height_in:g} in",
            f"Steps: {', '.join(self.completed) or 'none'}",
        ]
        lines.extend(f"Warning: {w}" for w in self.warnings)
        lines.extend(f"Failed: {f}" for f in self.failures)
        return "\n".join(lines)


class ProofWorkflow:
    """Builds proofs on a drawing host.

    Args:
        host: drawing host to issue commands to.
        config: project configuration (defaults when None).
        sleep: sleep function used between action retries.
    """

    def __init__(
        self,
        host: DrawingHost,
        config: Optional[ProjectConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.host = host
        self.config = config or ProjectConfig()
        self.sleep = sleep

    def run(self, request: ProofRequest) -> ProofResult:
        """Build the proof described by ``request``.

        Raises:
            LabelProofError: a step before the guidelines stage failed.
        """
        result = ProofResult(request=request)
        with LogContext(proof=DOCUMENT_TITLE, mode=request.mode.value):
            logger.info("Building %s proof for %s label", request.mode.value, request.label_type.value)
            if request.mode is ProofMode.UPLOAD:
                dieline, colors = self._upload(request, result)
            else:
                dieline, colors = self._make(request, result)
            self._finish(request, result, dieline, colors)
            self.host.redraw()
        return result

    @contextmanager
    def _step(self, result: ProofResult, name: str) -> Iterator[None]:
        with log_timing(logger, name, level=logging.INFO, step=name):
            try:
                yield
            except LabelProofError as e:
                if e.step is None:
                    e.step = name
                raise
        result.completed.append(name)

    # ------------------------------------------------------------------
    # Mode-specific start
    # ------------------------------------------------------------------

    def _make(self, request: ProofRequest, result: ProofResult) -> Tuple[Handle, Dict[str, SpotColor]]:
        host = self.host
        width_in, height_in = request.oriented_size()
        result.width_in, result.height_in = width_in, height_in

        with self._step(result, "document"):
            host.create_document(width_in, height_in, DOCUMENT_TITLE)
            colors = self._create_colors()

        with self._step(result, "dieline"):
            points = label_shape_points(request.shape, inches_to_points(width_in), inches_to_points(height_in))
            shape = host.add_path(points, closed=True)
            self._style_dieline(shape, colors)
        return shape, colors

    def _upload(self, request: ProofRequest, result: ProofResult) -> Tuple[Handle, Dict[str, SpotColor]]:
        host = self.host

        with self._step(result, "document"):
            host.open_document(request.dieline_file)
            colors = self._create_colors()

        with self._step(result, "dieline"):
            paths = host.path_items()
            if not paths:
                raise HostOperationFailure("No suitable dieline shape found in the uploaded file.")
            shape = max(paths, key=lambda h: host.measure_bounds(h).area)
            self._style_dieline(shape, colors)

            if request.swap_orientation:
                host.rotate(shape, 90)
            bounds = host.measure_bounds(shape)
            result.width_in = points_to_inches(bounds.width)
            result.height_in = points_to_inches(bounds.height)
        return shape, colors

    def _create_colors(self) -> Dict[str, SpotColor]:
        host = self.host
        return {
            'dieline': host.create_spot_color(DIELINE_COLOR_NAME, DIELINE_COLOR_CMYK),
            'dimension': host.create_spot_color(
                DIMENSION_COLOR_NAME, tuple(self.config.dimensions.color_cmyk)),
            'bleed': host.create_spot_color(BLEEDLINE_COLOR_NAME, BLEEDLINE_COLOR_CMYK),
        }

    def _style_dieline(self, shape: Handle, colors: Dict[str, SpotColor]) -> None:
        self.host.set_fill(shape, None)
        self.host.set_stroke(shape, width=DIELINE_STROKE_WIDTH, color=colors['dieline'])
        self.host.set_name(shape, DIELINE_NAME)

    # ------------------------------------------------------------------
    # Shared stages
    # ------------------------------------------------------------------

    def _finish(
        self,
        request: ProofRequest,
        result: ProofResult,
        shape: Handle,
        colors: Dict[str, SpotColor],
    ) -> None:
        host = self.host
        macros = self.config.macros

        with self._step(result, "offset"):
            host.select([shape])
            run_macro_with_retry(
                host, request.label_type.value, macros.offset_set,
                attempts=macros.attempts, delay=macros.delay_seconds, sleep=self.sleep,
                step="offset",
            )

        with self._step(result, "classify"):
            selected = host.selection()
            if len(selected) > 1:
                others = [h for h in selected if h != shape]
                host.select(others)
                self._classify_paths(request.label_type, shape, others, colors)
                self._adjust_artboard(request.label_type, host.measure_bounds(shape))
            elif len(selected) == 1:
                shape = selected[0]
            host.clear_selection()

        with self._step(result, "layers"):
            self._organize_layers(request.label_type, colors)

        with self._step(result, "locate"):
            dieline = self._locate_dieline(shape)
            result.dieline = host.measure_bounds(dieline)

        if request.add_guidelines:
            self._guidelines(request, result, dieline, colors)

    def _classify_paths(
        self,
        label_type: LabelType,
        dieline: Handle,
        others: List[Handle],
        colors: Dict[str, SpotColor],
    ) -> None:
        """Name the paths the offset action added."""
        host = self.host

        def area(handle: Handle) -> float:
            return host.measure_bounds(handle).area

        bleed = backer = None
        if label_type is LabelType.DIE_CUT:
            cut_color = host.create_spot_color(CUT_TO_PART_COLOR_NAME, CUT_TO_PART_COLOR_CMYK)
            unnamed = sorted((h for h in host.path_items() if not host.item_name(h)), key=area, reverse=True)
            if len(unnamed) >= 2:
                bleed, backer = unnamed[0], unnamed[1]
                host.set_name(bleed, BLEED_NAME)
                host.set_stroke(bleed, color=colors['bleed'])
                host.set_name(backer, BACKER_NAME)
                host.set_stroke(backer, color=cut_color)
            host.set_stroke(dieline, color=colors['dieline'])

        safezone = min(others, key=area)
        host.select([safezone])
        host.set_name(safezone, SAFEZONE_NAME)
        host.set_stroke(
            safezone,
            width=SAFEZONE_STROKE_WIDTH,
            color=host.create_spot_color(SAFEZONE_COLOR_NAME, SAFEZONE_COLOR_CMYK),
            dashes=SAFEZONE_DASHES,
        )

        if label_type is LabelType.DIE_CUT:
            host.z_order(safezone, ZOrder.SEND_BACKWARD)
            host.z_order(dieline, ZOrder.SEND_BACKWARD)
            if backer is not None:
                host.z_order(backer, ZOrder.BRING_FORWARD)
            if bleed is not None:
                host.z_order(bleed, ZOrder.BRING_TO_FRONT)

    def _adjust_artboard(self, label_type: LabelType, dieline: Rectangle) -> None:
        bleed_in = ARTBOARD_BLEED_INCHES.get(label_type)
        if bleed_in is None:
            return
        pad = inches_to_points(bleed_in)
        self.host.set_artboard(Rectangle(
            dieline.left - pad, dieline.top + pad, dieline.right + pad, dieline.bottom - pad,
        ))

    def _organize_layers(self, label_type: LabelType, colors: Dict[str, SpotColor]) -> None:
        host = self.host
        host.rename_layer(host.layer_names()[0], GUIDES_LAYER)
        host.add_layer(ART_LAYER)
        host.move_layer(ART_LAYER, ZOrder.SEND_BACKWARD)

        items = host.page_items(GUIDES_LAYER)
        if label_type is not LabelType.DIE_CUT and items and not host.item_name(items[-1]):
            last = items[-1]
            host.set_name(last, BLEED_NAME)
            host.set_stroke(last, color=colors['bleed'])
            host.z_order(last, ZOrder.BRING_TO_FRONT)
        host.redraw()

    def _locate_dieline(self, shape: Handle) -> Handle:
        found = self.host.find_by_name(GUIDES_LAYER, DIELINE_NAME)
        if found is not None:
            return found
        try:
            if self.host.item_name(shape) == DIELINE_NAME:
                return shape
        except HostOperationFailure:
            pass
        raise HostOperationFailure(
            "Cannot locate a valid Dieline path - aborting.",
            object_name=DIELINE_NAME,
        )

    # ------------------------------------------------------------------
    # Guidelines: white backer, dimensions, legend
    # ------------------------------------------------------------------

    def _guidelines(
        self,
        request: ProofRequest,
        result: ProofResult,
        dieline: Handle,
        colors: Dict[str, SpotColor],
    ) -> None:
        host = self.host
        bleed = host.find_by_name(GUIDES_LAYER, BLEED_NAME)

        with self._step(result, "backer"):
            host.add_layer(WHITE_LAYER)
            host.move_layer(WHITE_LAYER, ZOrder.SEND_TO_BACK)
            white = host.create_spot_color(WHITE_BACKER_COLOR_NAME, WHITE_BACKER_COLOR_CMYK)
            backer = compute_backer(result.dieline, result.width_in, result.height_in)
            box = backer.bounds
            rect = host.add_path(
                rectangle_points(box.left, box.top, box.width, box.height),
                layer=WHITE_LAYER, closed=True,
            )
            host.set_fill(rect, white)
            result.backer = backer

        try:
            with self._step(result, "dimensions"):
                layout = compute_dimension_layout(
                    result.dieline,
                    request.label_type,
                    color=colors['dimension'].name,
                    arrow_set=self.config.dimensions.action_set,
                )
                renderer = DimensionRenderer(
                    host,
                    colors['dimension'],
                    font_name=self.config.dimensions.font_name,
                    attempts=self.config.macros.attempts,
                    delay=self.config.macros.delay_seconds,
                    sleep=self.sleep,
                )
                renderer.draw(layout, layer=GUIDES_LAYER)
                result.dimensions = layout
        except LabelProofError as e:
            result.failures.append(str(e))

        try:
            with self._step(result, "legend"):
                self._legend(request, result, bleed)
        except AssetMissing as e:
            logger.warning("%s", e)
            result.warnings.append(str(e))
        except LabelProofError as e:
            result.failures.append(str(e))

        host.lock_layer(WHITE_LAYER)

    def _legend(self, request: ProofRequest, result: ProofResult, bleed: Optional[Handle]) -> None:
        name = legend_file_name(request.label_type, request.material, request.white_ink)
        path = resolve_legend(self.config.paths.legends_dir, name)
        if bleed is None:
            raise HostOperationFailure(
                "Bleed path not found; legend not placed.",
                object_name=BLEED_NAME,
            )
        _, scale = place_legend(
            self.host, path, result.backer.bounds,
            self.host.measure_bounds(bleed).bottom, layer=GUIDES_LAYER,
        )
        result.legend_scale = scale
