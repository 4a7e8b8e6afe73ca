"""
Per-user preferences (currently just the default Upload folder).

Values are read from a primary key/value store first (the host
application's preference store when there is one) and from a JSON file
in the user's home directory otherwise. Saving writes both. Preference
I/O never stops a proof: failures are logged and ignored.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, MutableMapping, Optional, Union

from label_proof.config import PREF_KEY_DEFAULT_DIR, PREFS_FILENAME

logger = logging.getLogger(__name__)

DEFAULT_DIR_FIELD = "defaultUploadDir"
UPLOAD_PATTERNS = ("*.ai", "*.pdf", "*.svg")


def default_prefs_path() -> Path:
    return Path.home() / PREFS_FILENAME


class PreferenceStore:
    """Preferences with a primary store and a JSON file fallback.

    Args:
        path: JSON fallback file (default ``~/LabelProofPrefs.json``).
        primary: key/value store consulted first, keyed by
            ``LabelProof/defaultUploadDir``.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        primary: Optional[MutableMapping[str, str]] = None,
    ):
        self.path = Path(path) if path else default_prefs_path()
        self.primary = primary

    def load(self) -> Dict[str, str]:
        prefs: Dict[str, str] = {}
        if self.primary is not None:
            stored = self.primary.get(PREF_KEY_DEFAULT_DIR)
            if stored:
                prefs[DEFAULT_DIR_FIELD] = stored

        if DEFAULT_DIR_FIELD not in prefs and self.path.exists():
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Could not read preferences %s: %s", self.path, e)
            else:
                if isinstance(data, dict) and data.get(DEFAULT_DIR_FIELD):
                    prefs[DEFAULT_DIR_FIELD] = str(data[DEFAULT_DIR_FIELD])
        return prefs

    def save(self, prefs: Dict[str, str]) -> None:
        if not prefs:
            return
        if self.primary is not None and prefs.get(DEFAULT_DIR_FIELD):
            self.primary[PREF_KEY_DEFAULT_DIR] = prefs[DEFAULT_DIR_FIELD]
        try:
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(prefs, f)
        except OSError as e:
            logger.warning("Could not write preferences %s: %s", self.path, e)

    @property
    def default_upload_dir(self) -> Optional[Path]:
        value = self.load().get(DEFAULT_DIR_FIELD)
        return Path(value) if value else None

    @default_upload_dir.setter
    def default_upload_dir(self, folder: Union[str, Path]) -> None:
        prefs = self.load()
        prefs[DEFAULT_DIR_FIELD] = str(folder)
        self.save(prefs)
        logger.info("Default upload folder set to %s", folder)


def most_recent_file(
    folder: Union[str, Path],
    patterns: Iterable[str] = UPLOAD_PATTERNS,
) -> Optional[Path]:
    """Most recently modified file in ``folder`` matching ``patterns``."""
    folder = Path(folder)
    if not folder.is_dir():
        return None
    candidates = [p for pattern in patterns for p in folder.glob(pattern) if p.is_file()]
    if not candidates:
        return None
    return max(candidates, key=lambda p: p.stat().st_mtime)
