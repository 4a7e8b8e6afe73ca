"""
Exception hierarchy for the proof workflow.

Every error carries the name of the workflow step that failed so the
message shown to the operator says where the proof stopped.
"""

from pathlib import Path
from typing import Optional, Union


class LabelProofError(Exception):
    """Base class for all proof generation errors."""

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.step = step

    def __str__(self) -> str:
        if self.step:
            return f"[{self.step}] {self.message}"
        return self.message


class UserCancelled(LabelProofError):
    """The configuration was dismissed before any drawing happened."""

    def __init__(self, message: str = "Cancelled by user", step: Optional[str] = None):
        super().__init__(message, step)


class ConfigurationError(LabelProofError):
    """Invalid request or a missing offset table entry."""


class HostOperationFailure(LabelProofError):
    """A drawing host call failed or did not produce what the step needs."""

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        macro: Optional[str] = None,
        object_name: Optional[str] = None,
    ):
        super().__init__(message, step)
        self.macro = macro
        self.object_name = object_name


class AssetMissing(LabelProofError):
    """A legend artwork file is not present in the legends folder."""

    def __init__(self, path: Union[str, Path], step: Optional[str] = None):
        super().__init__(f"Legend file not found: {path}", step)
        self.path = Path(path)
