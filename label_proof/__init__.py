"""
label_proof: label proof generator.

Builds print proofs around a label dieline: bleed and safezone guides,
dimension callouts, a white backer and the material legend. The command
line entry point is label_proof.cli (``label-proof`` / ``python main.py``).
"""

__version__ = "1.0.0"

from label_proof.logging_config import (
    setup_logging,
    get_logger,
    log_timing,
    LogContext,
)
from label_proof.request import ProofMode, ProofRequest
from label_proof.workflow import ProofResult, ProofWorkflow

__all__ = [
    "setup_logging",
    "get_logger",
    "log_timing",
    "LogContext",
    "ProofMode",
    "ProofRequest",
    "ProofResult",
    "ProofWorkflow",
]
