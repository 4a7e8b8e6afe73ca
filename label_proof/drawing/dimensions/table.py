"""
Dimension presentation constants per label type and size bucket.

The numbers are print-production tolerances taken from the press room's
proof templates: distance of the dimension line from the artwork
(inches), gap between line and text (inches), stroke width (pt), font
size (pt) and the recorded arrowhead action to run on the line.

Every (LabelType, SizeBucket) pair resolves. A lookup that does not is a
configuration error and is raised, never papered over with another row.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Union

from label_proof.config import LabelType
from label_proof.errors import ConfigurationError
from label_proof.geometry.sizing import SizeBucket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DimensionStyle:
    """Presentation of one dimension (line + text).

    Attributes:
        line_offset_in: distance from the object edge to the dimension line.
        text_offset_in: gap between the dimension line and its text.
        stroke_width: dimension line stroke (pt).
        font_size: dimension text size (pt).
        arrow_action: name of the arrowhead action in the arrows action set.
    """
    line_offset_in: float
    text_offset_in: float
    stroke_width: float
    font_size: float
    arrow_action: str


OffsetTable = Mapping[LabelType, Mapping[SizeBucket, DimensionStyle]]

_B = SizeBucket

_ROLLS: Dict[SizeBucket, DimensionStyle] = {
    _B.UNDER_0_5:     DimensionStyle(0.1875, 0.025, 0.5, 4, "50%"),
    _B.FROM_0_5_TO_1: DimensionStyle(0.2, 0.0375, 0.75, 6, "50%"),
    _B.FROM_1_TO_2:   DimensionStyle(0.2125, 0.0375, 0.75, 8, "50%"),
    _B.FROM_2_TO_4:   DimensionStyle(0.2375, 0.0375, 1, 8, "50%"),
    _B.FROM_4_TO_6:   DimensionStyle(0.3125, 0.0375, 1, 12, "75%"),
    _B.FROM_6_TO_10:  DimensionStyle(0.3125, 0.0375, 1, 12, "75%"),
    _B.OVER_10:       DimensionStyle(0.3125, 0.0375, 1, 12, "75%"),
}

_SHEETS: Dict[SizeBucket, DimensionStyle] = {
    _B.UNDER_0_5:     DimensionStyle(0.25, 0.025, 0.5, 4, "50%"),
    _B.FROM_0_5_TO_1: DimensionStyle(0.2625, 0.0375, 0.75, 6, "50%"),
    _B.FROM_1_TO_2:   DimensionStyle(0.275, 0.0375, 0.75, 8, "50%"),
    _B.FROM_2_TO_4:   DimensionStyle(0.3, 0.0375, 1, 8, "50%"),
    _B.FROM_4_TO_6:   DimensionStyle(0.375, 0.0375, 1, 12, "75%"),
    _B.FROM_6_TO_10:  DimensionStyle(0.375, 0.0375, 1, 12, "75%"),
    _B.OVER_10:       DimensionStyle(0.375, 0.0375, 1, 12, "75%"),
}

_DIE_CUT: Dict[SizeBucket, DimensionStyle] = {
    _B.UNDER_0_5:     DimensionStyle(0.3125, 0.025, 0.5, 4, "50%"),
    _B.FROM_0_5_TO_1: DimensionStyle(0.325, 0.0375, 0.75, 6, "50%"),
    _B.FROM_1_TO_2:   DimensionStyle(0.3375, 0.0375, 0.75, 8, "50%"),
    _B.FROM_2_TO_4:   DimensionStyle(0.3625, 0.0375, 1, 8, "50%"),
    _B.FROM_4_TO_6:   DimensionStyle(0.4375, 0.0375, 1, 12, "75%"),
    _B.FROM_6_TO_10:  DimensionStyle(0.4375, 0.0375, 1, 12, "75%"),
    _B.OVER_10:       DimensionStyle(0.4375, 0.0375, 1, 12, "75%"),
}

# Custom proofs are laid out on sheet templates.
DIMENSION_OFFSETS: Dict[LabelType, Dict[SizeBucket, DimensionStyle]] = {
    LabelType.SHEETS: _SHEETS,
    LabelType.ROLLS: _ROLLS,
    LabelType.DIE_CUT: _DIE_CUT,
    LabelType.CUSTOM: dict(_SHEETS),
}


def lookup_style(
    label_type: Union[LabelType, str],
    bucket: SizeBucket,
    table: Optional[OffsetTable] = None,
) -> DimensionStyle:
    """Return the dimension style for a label type and size bucket.

    Args:
        label_type: label type (enum or its display name).
        bucket: size bucket of the dimensioned object.
        table: offset table to search (defaults to DIMENSION_OFFSETS).

    Raises:
        ConfigurationError: unknown label type or no row for the pair.
    """
    table = DIMENSION_OFFSETS if table is None else table
    try:
        label_type = LabelType.parse(label_type)
    except ValueError as e:
        raise ConfigurationError(str(e), step="dimensions") from e

    rows = table.get(label_type)
    if rows is None:
        raise ConfigurationError(
            f"No dimension offsets for label type '{label_type.value}'",
            step="dimensions",
        )
    style = rows.get(bucket)
    if style is None:
        raise ConfigurationError(
            f"No dimension offsets for size category '{bucket.value}' "
            f"and label type '{label_type.value}'",
            step="dimensions",
        )
    logger.debug("Dimension style %s/%s: %s", label_type.value, bucket.value, style)
    return style
