"""
JSON project configuration for label_proof.

Per-installation overrides of the built-in defaults in config.py: where
the legend artwork lives, which font and actions the dimensions use,
how hard to retry recorded actions, and where proofs are written.

Search order for ``.labelproof.json``:
1. Explicit config path (``--config``)
2. The dieline file's directory (Upload mode)
3. Current working directory
4. User's home directory

Example .labelproof.json:
{
    "paths": {
        "legends_dir": "/Volumes/Art/Legends"
    },
    "dimensions": {
        "font_name": "MyriadPro-Regular",
        "action_set": "Add Arrows",
        "color_cmyk": [0, 0, 0, 100]
    },
    "macros": {
        "attempts": 3,
        "delay_seconds": 0.25,
        "offset_set": "Offset"
    },
    "output": {
        "formats": ["svg", "dxf"],
        "output_dir": "proofs",
        "prefix": ""
    }
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from label_proof.config import (
    ARROW_ACTION_SET,
    DIMENSION_COLOR_CMYK,
    DIMENSION_FONT_NAME,
    MACRO_ATTEMPTS,
    MACRO_RETRY_DELAY_S,
    OFFSET_ACTION_SET,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".labelproof.json"


@dataclass
class PathsConfig:
    """Asset locations."""
    legends_dir: str = "Legends"


@dataclass
class DimensionsConfig:
    """Dimension annotation settings."""
    font_name: str = DIMENSION_FONT_NAME
    action_set: str = ARROW_ACTION_SET
    color_cmyk: List[float] = field(default_factory=lambda: list(DIMENSION_COLOR_CMYK))


@dataclass
class MacrosConfig:
    """Recorded action invocation."""
    attempts: int = MACRO_ATTEMPTS
    delay_seconds: float = MACRO_RETRY_DELAY_S
    offset_set: str = OFFSET_ACTION_SET


@dataclass
class OutputConfig:
    """Output file configuration."""
    formats: List[str] = field(default_factory=lambda: ["svg"])
    output_dir: str = ""
    prefix: str = ""


@dataclass
class ProjectConfig:
    """Complete project configuration."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    dimensions: DimensionsConfig = field(default_factory=DimensionsConfig)
    macros: MacrosConfig = field(default_factory=MacrosConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Build a configuration, ignoring unknown sections and keys."""
        config = cls()
        for section in fields(cls):
            values = data.get(section.name)
            if not isinstance(values, dict):
                continue
            target = getattr(config, section.name)
            for key, value in values.items():
                if hasattr(target, key):
                    setattr(target, key, value)
                elif not key.startswith('_'):
                    logger.warning("Unknown config key %s.%s ignored", section.name, key)
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(
    dieline_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find the configuration file using the search order above.

    Returns:
        Path to config file if found, None otherwise
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    candidates = []
    if dieline_path:
        candidates.append(Path(dieline_path).parent / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    candidates.append(Path.home() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(
    dieline_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load configuration, falling back to defaults when none is usable."""
    config_path = find_config_file(dieline_path, explicit_config)

    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, IOError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return ProjectConfig()


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> Path:
    """Write a commented sample configuration file."""
    sample: Dict[str, Any] = {"_comment": "Label proof generator configuration", "_version": "1.0"}
    notes = {
        "paths": "Folder holding the SZ-CL legend artwork",
        "dimensions": "Dimension text font, arrowhead action set and line color (CMYK %)",
        "macros": "Recorded action retries and the offset action set",
        "output": "Proof formats (svg, dxf) and destination",
    }
    for section, values in ProjectConfig().to_dict().items():
        sample[section] = {"_comment": notes[section], **values}

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)

    logger.info("Sample configuration created: %s", path)
    return path
