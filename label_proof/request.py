"""
Proof request: the validated configuration a proof is built from.

Replaces the old modal dialog. Construction applies the same rules the
dialog enforced on its controls:

- Sheets labels carry no material and no white ink.
- White ink needs a material; White is picked when none is given.
- Die-cut, Custom and white-ink proofs always get guidelines.

and rejects the same incomplete input with the same messages.
"""

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from label_proof.config import MATERIALS, LabelType, ShapeType
from label_proof.errors import ConfigurationError

logger = logging.getLogger(__name__)

MISSING_SIZE = "Missing the label size."
MISSING_WIDTH = "Missing the label width."
MISSING_HEIGHT = "Missing the label height."
MISSING_TEMPLATE = "Please upload a proof template."

DEFAULT_WHITE_INK_MATERIAL = "White"


class ProofMode(Enum):
    MAKE = "Make"
    UPLOAD = "Upload"

    @classmethod
    def parse(cls, value) -> 'ProofMode':
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown mode: {value!r}")


def _positive(value: Any) -> Optional[float]:
    """``value`` as a positive float, or None when it is missing or not usable."""
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or number <= 0:
        return None
    return number


@dataclass(frozen=True)
class ProofRequest:
    """Everything needed to build one proof.

    Attributes:
        mode: Make (draw a new dieline) or Upload (open existing artwork).
        label_type: label construction.
        shape: dieline shape (Make mode).
        material: legend material, one of MATERIALS, or None.
        white_ink: proof prints white ink.
        add_guidelines: draw dimensions, backer and legend.
        swap_orientation: exchange width and height.
        width_in: label width in inches (Make mode).
        height_in: label height in inches (Make mode).
        dieline_file: artwork to open (Upload mode).
    """
    mode: ProofMode
    label_type: LabelType
    shape: Optional[ShapeType] = None
    material: Optional[str] = None
    white_ink: bool = False
    add_guidelines: bool = False
    swap_orientation: bool = False
    width_in: Optional[float] = None
    height_in: Optional[float] = None
    dieline_file: Optional[Path] = None

    @classmethod
    def make(
        cls,
        label_type: Union[LabelType, str],
        width_in: Any,
        height_in: Any,
        shape: Union[ShapeType, str] = ShapeType.SQUARED,
        material: Optional[str] = None,
        white_ink: bool = False,
        add_guidelines: bool = False,
        swap_orientation: bool = False,
    ) -> 'ProofRequest':
        """Request for a new dieline of ``width_in x height_in``.

        Raises:
            ConfigurationError: missing size, unknown label type, shape or material.
        """
        width = _positive(width_in)
        height = _positive(height_in)
        if width is None and height is None:
            raise ConfigurationError(MISSING_SIZE, step="configure")
        if width is None:
            raise ConfigurationError(MISSING_WIDTH, step="configure")
        if height is None:
            raise ConfigurationError(MISSING_HEIGHT, step="configure")

        request = cls(
            mode=ProofMode.MAKE,
            label_type=_parse(LabelType, label_type),
            shape=_parse(ShapeType, shape),
            material=material,
            white_ink=bool(white_ink),
            add_guidelines=bool(add_guidelines),
            swap_orientation=bool(swap_orientation),
            width_in=width,
            height_in=height,
        )
        return request.with_dialog_rules()

    @classmethod
    def upload(
        cls,
        label_type: Union[LabelType, str],
        dieline_file: Optional[Union[str, Path]],
        material: Optional[str] = None,
        white_ink: bool = False,
        add_guidelines: bool = False,
        swap_orientation: bool = False,
    ) -> 'ProofRequest':
        """Request for a proof around existing dieline artwork.

        Raises:
            ConfigurationError: no file, unknown label type or material.
        """
        if not dieline_file:
            raise ConfigurationError(MISSING_TEMPLATE, step="configure")

        request = cls(
            mode=ProofMode.UPLOAD,
            label_type=_parse(LabelType, label_type),
            material=material,
            white_ink=bool(white_ink),
            add_guidelines=bool(add_guidelines),
            swap_orientation=bool(swap_orientation),
            dieline_file=Path(dieline_file),
        )
        return request.with_dialog_rules()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'ProofRequest':
        """Build from a dialog-style record (``labelType``, ``widthInches``, ...)."""
        mode = _parse(ProofMode, data.get("mode", ProofMode.MAKE.value))
        common = dict(
            label_type=data.get("labelType"),
            material=data.get("material") or None,
            white_ink=data.get("whiteInk", False),
            add_guidelines=data.get("addGuidelines", False),
            swap_orientation=data.get("swapOrientation", False),
        )
        if mode is ProofMode.UPLOAD:
            return cls.upload(dieline_file=data.get("dieLineFile"), **common)
        return cls.make(
            width_in=data.get("widthInches"),
            height_in=data.get("heightInches"),
            shape=data.get("shapeType") or ShapeType.SQUARED,
            **common,
        )

    def with_dialog_rules(self) -> 'ProofRequest':
        """Copy with the dialog's control rules applied and the material checked."""
        material = self.material
        white_ink = self.white_ink
        if self.label_type is LabelType.SHEETS:
            if material or white_ink:
                logger.debug("Sheets proofs carry no material or white ink")
            material, white_ink = None, False
        elif white_ink and not material:
            material = DEFAULT_WHITE_INK_MATERIAL

        if material is not None:
            material = _material(material)

        guidelines = (
            self.add_guidelines
            or white_ink
            or self.label_type in (LabelType.DIE_CUT, LabelType.CUSTOM)
        )
        return replace(self, material=material, white_ink=white_ink, add_guidelines=guidelines)

    def oriented_size(self) -> Tuple[Optional[float], Optional[float]]:
        """``(width_in, height_in)`` after the orientation swap."""
        if self.swap_orientation:
            return (self.height_in, self.width_in)
        return (self.width_in, self.height_in)


def _parse(enum_cls, value):
    """Parse an enum value, reporting bad input as a ConfigurationError."""
    if value is None:
        raise ConfigurationError(f"Missing {enum_cls.__name__}", step="configure")
    try:
        return enum_cls.parse(value)
    except ValueError as e:
        raise ConfigurationError(str(e), step="configure") from e


def _material(value: str) -> str:
    for name in MATERIALS:
        if name.lower() == str(value).strip().lower():
            return name
    raise ConfigurationError(
        f"Unknown material '{value}' (expected one of {', '.join(MATERIALS)})",
        step="configure",
    )
