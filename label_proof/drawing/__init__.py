"""
Proof annotations: dimensions, white backer and legend.
"""

from label_proof.drawing.backer import BackerRect, compute_backer, scale_for
from label_proof.drawing.legend import legend_file_name, legend_scale_percent, place_legend

__all__ = [
    "BackerRect",
    "compute_backer",
    "legend_file_name",
    "legend_scale_percent",
    "place_legend",
    "scale_for",
]
