"""
Built-in constants for the label proof generator.

Everything here is a process-wide immutable default. Values that a shop
may want to change per installation (legends folder, font, retry policy)
can be overridden through ``.labelproof.json`` (see project_config.py).
"""

from enum import Enum
from typing import Dict, Tuple

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

INCH_TO_POINTS = 72.0

# ---------------------------------------------------------------------------
# Label types and shapes
# ---------------------------------------------------------------------------


class LabelType(Enum):
    """Label construction. Drives bleed, offset table row and legend name."""
    SHEETS = "Sheets"
    ROLLS = "Rolls"
    DIE_CUT = "Die-cut"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, value) -> 'LabelType':
        """Parse a label type from user input ("Die Cut", "diecut", ...).

        Raises:
            ValueError: if the name matches no label type.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace(' ', '').replace('-', '').replace('_', '')
        for member in cls:
            if member.value.lower().replace('-', '') == key:
                return member
        raise ValueError(f"Unknown label type: {value!r}")


class ShapeType(Enum):
    """Dieline outline drawn in Make mode."""
    SQUARED = "Squared"
    ROUNDED = "Rounded"
    ROUND = "Round"

    @classmethod
    def parse(cls, value) -> 'ShapeType':
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown shape type: {value!r}")


MATERIALS = ("White", "Clear", "Metallic", "Holographic")

ROUNDED_CORNER_RADIUS_PTS = 9.0

# Artboard growth applied once the offset action produced bleed paths.
ARTBOARD_BLEED_INCHES: Dict[LabelType, float] = {
    LabelType.ROLLS: 0.0625,
    LabelType.DIE_CUT: 0.1875,
}

# Offsets used by the built-in emulation of the recorded "Offset" actions.
EMULATED_BLEED_INCHES: Dict[LabelType, float] = {
    LabelType.SHEETS: 0.0625,
    LabelType.ROLLS: 0.0625,
    LabelType.DIE_CUT: 0.1875,
    LabelType.CUSTOM: 0.0625,
}
EMULATED_SAFEZONE_INCHES = 0.0625
EMULATED_BACKER_INCHES = 0.0625

# ---------------------------------------------------------------------------
# Spot colors (CMYK percentages)
# ---------------------------------------------------------------------------

CMYK = Tuple[float, float, float, float]

DIELINE_COLOR_NAME = "Dieline"
DIELINE_COLOR_CMYK: CMYK = (0, 100, 0, 0)
DIMENSION_COLOR_NAME = "DimensionLine"
DIMENSION_COLOR_CMYK: CMYK = (0, 0, 0, 100)
BLEEDLINE_COLOR_NAME = "BleedLine"
BLEEDLINE_COLOR_CMYK: CMYK = (100, 0, 0, 0)
SAFEZONE_COLOR_NAME = "Safezone"
SAFEZONE_COLOR_CMYK: CMYK = (0, 0, 0, 50)
CUT_TO_PART_COLOR_NAME = "SEI-CutToPart"
CUT_TO_PART_COLOR_CMYK: CMYK = (62.66, 0, 100, 0)
WHITE_BACKER_COLOR_NAME = "WhiteBacker"
WHITE_BACKER_COLOR_CMYK: CMYK = (0, 0, 0, 0)

DIELINE_STROKE_WIDTH = 1.0
SAFEZONE_STROKE_WIDTH = 1.0
SAFEZONE_DASHES = (5.0,)

# ---------------------------------------------------------------------------
# Names of layers and page items
# ---------------------------------------------------------------------------

GUIDES_LAYER = "Guides"
ART_LAYER = "Art"
WHITE_LAYER = "White Background"

DIELINE_NAME = "Dieline"
BLEED_NAME = "Bleed"
SAFEZONE_NAME = "Safezone"
BACKER_NAME = "Backer"
LEGENDS_NAME = "Legends"
WIDTH_GROUP_NAME = "Width"
HEIGHT_GROUP_NAME = "Height"

DOCUMENT_TITLE = "LabelProof"

# ---------------------------------------------------------------------------
# Recorded actions
# ---------------------------------------------------------------------------

OFFSET_ACTION_SET = "Offset"
ARROW_ACTION_SET = "Add Arrows"

MACRO_ATTEMPTS = 3
MACRO_RETRY_DELAY_S = 0.25

# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

DIMENSION_FONT_NAME = "MyriadPro-Regular"

# Average glyph advance and line height relative to font size, used by hosts
# that cannot measure real glyph outlines.
TEXT_WIDTH_RATIO = 0.55
TEXT_HEIGHT_RATIO = 1.0

# ---------------------------------------------------------------------------
# Legend
# ---------------------------------------------------------------------------

LEGEND_PREFIX = "SZ-CL"
LEGEND_EXTENSION = ".ai"
LEGEND_MAX_HEIGHT_FRACTION = 1.0 / 3.0
LEGEND_MAX_WIDTH_FRACTION = 0.8
# Artwork size assumed for placed files a host cannot measure (points).
LEGEND_DEFAULT_SIZE_PTS = (216.0, 72.0)

PREFS_FILENAME = "LabelProofPrefs.json"
PREF_KEY_DEFAULT_DIR = "LabelProof/defaultUploadDir"
