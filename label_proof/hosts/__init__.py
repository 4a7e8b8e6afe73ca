"""
Drawing hosts: the interface the proof workflow draws through and its
in-memory, SVG and DXF realizations.
"""

from label_proof.hosts.base import (
    DrawingHost,
    Handle,
    SpotColor,
    ZOrder,
    run_macro_with_retry,
)
from label_proof.hosts.memory import MemoryDrawingHost
from label_proof.hosts.svg import SvgDrawingHost

__all__ = [
    "DrawingHost",
    "Handle",
    "MemoryDrawingHost",
    "SpotColor",
    "SvgDrawingHost",
    "ZOrder",
    "run_macro_with_retry",
]
