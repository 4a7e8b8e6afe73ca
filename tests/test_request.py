"""
Unit tests for proof requests and user preferences.

Tests:
- Make/Upload validation messages
- Label type, shape and material parsing
- Rules the configuration dialog applied to its controls
- Preference store lookup order and failure tolerance
- Newest-file fallback for Upload mode
"""

import json
import os
from pathlib import Path

import pytest

from label_proof.config import LabelType, ShapeType
from label_proof.errors import ConfigurationError
from label_proof.preferences import (
    DEFAULT_DIR_FIELD,
    PreferenceStore,
    most_recent_file,
)
from label_proof.request import (
    MISSING_HEIGHT,
    MISSING_SIZE,
    MISSING_TEMPLATE,
    MISSING_WIDTH,
    ProofMode,
    ProofRequest,
)


class TestMakeRequest:
    """Tests for ProofRequest.make."""

    def test_basic(self):
        request = ProofRequest.make("Rolls", 4, 6)
        assert request.mode is ProofMode.MAKE
        assert request.label_type is LabelType.ROLLS
        assert request.shape is ShapeType.SQUARED
        assert (request.width_in, request.height_in) == (4.0, 6.0)
        assert not request.add_guidelines

    @pytest.mark.parametrize("width, height, message", [
        (None, None, MISSING_SIZE),
        ("", 0, MISSING_SIZE),
        (None, 2, MISSING_WIDTH),
        (-1, 2, MISSING_WIDTH),
        (2, float("nan"), MISSING_HEIGHT),
        (2, "abc", MISSING_HEIGHT),
    ])
    def test_missing_size(self, width, height, message):
        with pytest.raises(ConfigurationError) as exc_info:
            ProofRequest.make("Rolls", width, height)
        assert exc_info.value.message == message
        assert exc_info.value.step == "configure"

    def test_string_sizes(self):
        request = ProofRequest.make("Sheets", "2.5", "1")
        assert request.oriented_size() == (2.5, 1.0)

    @pytest.mark.parametrize("name", ["Die-cut", "Die Cut", "DieCut", "die_cut"])
    def test_die_cut_spellings(self, name):
        assert ProofRequest.make(name, 1, 1).label_type is LabelType.DIE_CUT

    def test_unknown_label_type(self):
        with pytest.raises(ConfigurationError, match="Unknown label type"):
            ProofRequest.make("Stickers", 1, 1)

    def test_unknown_shape(self):
        with pytest.raises(ConfigurationError, match="Unknown shape type"):
            ProofRequest.make("Rolls", 1, 1, shape="Star")

    def test_shape_case_insensitive(self):
        assert ProofRequest.make("Rolls", 1, 1, shape="round").shape is ShapeType.ROUND

    def test_swap(self):
        request = ProofRequest.make("Rolls", 4, 6, swap_orientation=True)
        assert request.oriented_size() == (6.0, 4.0)
        assert (request.width_in, request.height_in) == (4.0, 6.0)

    def test_immutable(self):
        request = ProofRequest.make("Rolls", 4, 6)
        with pytest.raises(AttributeError):
            request.width_in = 5


class TestDialogRules:
    """Tests for the rules applied by with_dialog_rules."""

    def test_sheets_drop_material_and_white_ink(self):
        request = ProofRequest.make("Sheets", 1, 1, material="Clear", white_ink=True)
        assert request.material is None
        assert not request.white_ink
        assert not request.add_guidelines

    def test_white_ink_defaults_material(self):
        request = ProofRequest.make("Rolls", 1, 1, white_ink=True)
        assert request.material == "White"
        assert request.add_guidelines

    def test_material_normalized(self):
        assert ProofRequest.make("Rolls", 1, 1, material="holographic").material == "Holographic"

    def test_unknown_material(self):
        with pytest.raises(ConfigurationError, match="Unknown material"):
            ProofRequest.make("Rolls", 1, 1, material="Paper")

    @pytest.mark.parametrize("label_type", ["Die-cut", "Custom"])
    def test_guidelines_forced(self, label_type):
        assert ProofRequest.make(label_type, 1, 1).add_guidelines

    def test_guidelines_optional_for_rolls(self):
        assert not ProofRequest.make("Rolls", 1, 1).add_guidelines
        assert ProofRequest.make("Rolls", 1, 1, add_guidelines=True).add_guidelines


class TestUploadRequest:
    """Tests for ProofRequest.upload and from_mapping."""

    def test_upload(self):
        request = ProofRequest.upload("Rolls", "art/dieline.ai", material="Clear")
        assert request.mode is ProofMode.UPLOAD
        assert request.dieline_file == Path("art/dieline.ai")
        assert request.material == "Clear"
        assert request.width_in is None

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_template(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            ProofRequest.upload("Rolls", value)
        assert exc_info.value.message == MISSING_TEMPLATE

    def test_from_mapping_make(self):
        request = ProofRequest.from_mapping({
            "mode": "Make",
            "labelType": "Rolls",
            "shapeType": "Squared",
            "widthInches": 4,
            "heightInches": 6,
            "addGuidelines": True,
        })
        assert request.mode is ProofMode.MAKE
        assert request.add_guidelines
        assert request.oriented_size() == (4.0, 6.0)

    def test_from_mapping_upload(self):
        request = ProofRequest.from_mapping({
            "mode": "Upload",
            "labelType": "Die-cut",
            "dieLineFile": "dieline.svg",
            "whiteInk": True,
            "swapOrientation": True,
        })
        assert request.mode is ProofMode.UPLOAD
        assert request.material == "White"
        assert request.swap_orientation

    def test_from_mapping_defaults_to_make(self):
        request = ProofRequest.from_mapping({"labelType": "Sheets", "widthInches": 1, "heightInches": 1})
        assert request.mode is ProofMode.MAKE
        assert request.shape is ShapeType.SQUARED

    def test_from_mapping_bad_mode(self):
        with pytest.raises(ConfigurationError):
            ProofRequest.from_mapping({"mode": "Print", "labelType": "Rolls"})

    def test_from_mapping_missing_label_type(self):
        with pytest.raises(ConfigurationError, match="Missing LabelType"):
            ProofRequest.from_mapping({"widthInches": 1, "heightInches": 1})


class TestPreferenceStore:
    """Tests for PreferenceStore."""

    def test_empty(self, tmp_path):
        store = PreferenceStore(tmp_path / "prefs.json")
        assert store.load() == {}
        assert store.default_upload_dir is None

    def test_json_round_trip(self, tmp_path):
        path = tmp_path / "prefs.json"
        PreferenceStore(path).default_upload_dir = tmp_path / "dielines"
        assert json.loads(path.read_text()) == {DEFAULT_DIR_FIELD: str(tmp_path / "dielines")}
        assert PreferenceStore(path).default_upload_dir == tmp_path / "dielines"

    def test_primary_store_first(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text(json.dumps({DEFAULT_DIR_FIELD: "/from/json"}))
        primary = {"LabelProof/defaultUploadDir": "/from/host"}
        assert PreferenceStore(path, primary).default_upload_dir == Path("/from/host")

    def test_json_fallback(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text(json.dumps({DEFAULT_DIR_FIELD: "/from/json"}))
        assert PreferenceStore(path, primary={}).default_upload_dir == Path("/from/json")

    def test_save_writes_both(self, tmp_path):
        path = tmp_path / "prefs.json"
        primary = {}
        PreferenceStore(path, primary).save({DEFAULT_DIR_FIELD: "/x"})
        assert primary == {"LabelProof/defaultUploadDir": "/x"}
        assert json.loads(path.read_text())[DEFAULT_DIR_FIELD] == "/x"

    def test_corrupt_file_ignored(self, tmp_path, caplog):
        path = tmp_path / "prefs.json"
        path.write_text("{not json")
        assert PreferenceStore(path).load() == {}
        assert "Could not read preferences" in caplog.text

    def test_unwritable_file_ignored(self, tmp_path, caplog):
        store = PreferenceStore(tmp_path / "missing" / "prefs.json")
        store.save({DEFAULT_DIR_FIELD: "/x"})
        assert "Could not write preferences" in caplog.text


class TestMostRecentFile:
    """Tests for most_recent_file."""

    def test_newest_matching(self, tmp_path):
        old = tmp_path / "old.ai"
        new = tmp_path / "new.pdf"
        other = tmp_path / "notes.txt"
        for i, path in enumerate((old, new, other)):
            path.write_text("x")
            os.utime(path, (1000 + i * 100, 1000 + i * 100))
        assert most_recent_file(tmp_path) == new

    def test_no_match(self, tmp_path):
        (tmp_path / "notes.txt").write_text("x")
        assert most_recent_file(tmp_path) is None

    def test_missing_folder(self, tmp_path):
        assert most_recent_file(tmp_path / "nope") is None
