"""
Dimension annotation: offset table, number formatting, layout and rendering.
"""

from label_proof.drawing.dimensions.formatting import format_dimension
from label_proof.drawing.dimensions.layout import (
    DimensionLayout,
    DimensionLineSpec,
    DimensionSpec,
    DimensionTextSpec,
    compute_dimension_layout,
    predict_text_bounds,
)
from label_proof.drawing.dimensions.renderer import DimensionRenderer
from label_proof.drawing.dimensions.table import DIMENSION_OFFSETS, DimensionStyle, lookup_style

__all__ = [
    "DIMENSION_OFFSETS",
    "DimensionLayout",
    "DimensionLineSpec",
    "DimensionRenderer",
    "DimensionSpec",
    "DimensionStyle",
    "DimensionTextSpec",
    "compute_dimension_layout",
    "format_dimension",
    "lookup_style",
    "predict_text_bounds",
]
