"""
Pytest configuration and fixtures for the label proof generator.

Provides:
- In-memory drawing host fixtures
- Sample bounds (points) for layout tests
- Temporary legends folder with legend artwork
- A no-op sleep so action retries run instantly
"""

import logging
from pathlib import Path
from typing import List

import pytest

from label_proof.config import LabelType
from label_proof.drawing.legend import legend_file_name
from label_proof.geometry.rect import Rectangle
from label_proof.hosts.memory import MemoryDrawingHost
from label_proof.logging_config import PACKAGE_LOGGER
from label_proof.project_config import ProjectConfig

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


# ============================================================================
# Hosts
# ============================================================================

@pytest.fixture
def memory_host() -> MemoryDrawingHost:
    """Memory host with the built-in Offset and Add Arrows actions."""
    return MemoryDrawingHost()


@pytest.fixture
def bare_host() -> MemoryDrawingHost:
    """Memory host without any recorded actions."""
    return MemoryDrawingHost(default_actions=False)


class SleepRecorder:
    """Stand-in for time.sleep that records the requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def no_sleep() -> SleepRecorder:
    return SleepRecorder()


# ============================================================================
# Geometry
# ============================================================================

@pytest.fixture
def two_inch_square() -> Rectangle:
    """2" x 2" object at the origin (points)."""
    return Rectangle(left=0.0, top=144.0, right=144.0, bottom=0.0)


@pytest.fixture
def four_by_six() -> Rectangle:
    """4" x 6" object at the origin (points)."""
    return Rectangle(left=0.0, top=432.0, right=288.0, bottom=0.0)


# ============================================================================
# Legends & configuration
# ============================================================================

@pytest.fixture
def legends_dir(tmp_path: Path) -> Path:
    """Legends folder holding the plain legend of every label type."""
    folder = tmp_path / "Legends"
    folder.mkdir()
    for label_type in LabelType:
        (folder / legend_file_name(label_type)).write_bytes(b"%PDF-legend")
    return folder


@pytest.fixture
def proof_config(legends_dir: Path) -> ProjectConfig:
    """Default configuration pointing at the temporary legends folder."""
    config = ProjectConfig()
    config.paths.legends_dir = str(legends_dir)
    return config


# ============================================================================
# Assertion Helpers
# ============================================================================

def assert_bounds_approx(actual: Rectangle, expected, tolerance: float = 1e-6) -> None:
    """Assert that ``actual`` matches ``(left, top, right, bottom)``."""
    for got, want, edge in zip(actual.as_bounds(), expected, ("left", "top", "right", "bottom")):
        assert abs(got - want) < tolerance, f"{edge}: expected {want}, got {got}"


# ============================================================================
# Logging
# ============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging so records keep reaching caplog."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
