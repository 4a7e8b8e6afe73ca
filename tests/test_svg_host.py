"""
Tests for the SVG drawing host.

Tests:
- CMYK to screen color conversion
- Reading SVG dielines (viewBox, plain size, shapes, errors)
- Writing a complete proof: layers, strokes, dashes, arrow markers, text
- Upload mode from an SVG dieline
"""

import re
import xml.etree.ElementTree as ET

import pytest

from label_proof.errors import HostOperationFailure
from label_proof.geometry.rect import Rectangle
from label_proof.hosts.svg import SvgDrawingHost, cmyk_to_hex
from label_proof.request import ProofRequest
from label_proof.workflow import ProofWorkflow

from conftest import assert_bounds_approx

SVG_HEADER = '<svg xmlns="http://www.w3.org/2000/svg" {attrs}>{body}</svg>'


def _write_svg(path, body, attrs='viewBox="0 0 300 200"'):
    path.write_text(SVG_HEADER.format(attrs=attrs, body=body), encoding="utf-8")
    return path


def _local(tag):
    return tag.rsplit('}', 1)[-1]


def _numbers(value):
    return [float(v) for v in re.findall(r'[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?', value)]


class TestCmykToHex:
    """Tests for cmyk_to_hex."""

    @pytest.mark.parametrize("cmyk, expected", [
        ((0, 0, 0, 0), "#ffffff"),
        ((0, 0, 0, 100), "#000000"),
        ((100, 0, 0, 0), "#00ffff"),
        ((0, 100, 0, 0), "#ff00ff"),
        ((0, 0, 0, 50), "#808080"),
    ])
    def test_builds(self, cmyk, expected):
        assert cmyk_to_hex(cmyk) == expected


class TestReadSvg:
    """Tests for SvgDrawingHost.read_svg."""

    def test_rect(self, tmp_path):
        path = _write_svg(tmp_path / "d.svg", '<rect x="42" y="28" width="216" height="144"/>')
        artboard, outlines = SvgDrawingHost.read_svg(path)

        assert artboard.as_bounds() == (0.0, 200.0, 300.0, 0.0)
        assert len(outlines) == 1
        assert_bounds_approx(Rectangle.from_points(outlines[0]), (42, 172, 258, 28))

    def test_circle_and_ellipse(self, tmp_path):
        body = '<circle cx="100" cy="100" r="50"/><ellipse cx="200" cy="50" rx="30" ry="20"/>'
        _, outlines = SvgDrawingHost.read_svg(_write_svg(tmp_path / "d.svg", body))

        assert_bounds_approx(Rectangle.from_points(outlines[0]), (50, 150, 150, 50))
        assert_bounds_approx(Rectangle.from_points(outlines[1]), (170, 170, 230, 130))

    def test_polygon(self, tmp_path):
        path = _write_svg(tmp_path / "d.svg", '<polygon points="0,0 10,0 10,10"/>')
        _, outlines = SvgDrawingHost.read_svg(path)
        assert outlines[0].tolist() == [[0, 200], [10, 200], [10, 190]]

    def test_short_polyline_ignored(self, tmp_path):
        path = _write_svg(tmp_path / "d.svg", '<polyline points="0,0 10,0"/>')
        _, outlines = SvgDrawingHost.read_svg(path)
        assert outlines == []

    def test_viewbox_origin(self, tmp_path):
        path = _write_svg(
            tmp_path / "d.svg",
            '<rect x="10" y="20" width="30" height="40"/>',
            attrs='viewBox="10 20 100 100"',
        )
        _, outlines = SvgDrawingHost.read_svg(path)
        assert_bounds_approx(Rectangle.from_points(outlines[0]), (0, 100, 30, 60))

    def test_size_without_viewbox(self, tmp_path):
        path = _write_svg(
            tmp_path / "d.svg",
            '<rect width="72" height="72"/>',
            attrs='width="72pt" height="144pt"',
        )
        artboard, _ = SvgDrawingHost.read_svg(path)
        assert artboard.as_bounds() == (0.0, 144.0, 72.0, 0.0)

    def test_no_size_uses_artwork(self, tmp_path):
        path = _write_svg(tmp_path / "d.svg", '<rect x="5" y="5" width="20" height="10"/>', attrs='')
        artboard, _ = SvgDrawingHost.read_svg(path)
        assert_bounds_approx(artboard, (5, -5, 25, -15))

    def test_empty_without_size(self, tmp_path):
        with pytest.raises(HostOperationFailure, match="No artwork"):
            SvgDrawingHost.read_svg(_write_svg(tmp_path / "d.svg", '', attrs=''))

    def test_not_xml(self, tmp_path):
        path = tmp_path / "d.svg"
        path.write_text("<svg><rect", encoding="utf-8")
        with pytest.raises(HostOperationFailure, match="Error opening file"):
            SvgDrawingHost.read_svg(path)

    def test_probe_artwork_size(self, tmp_path):
        path = _write_svg(tmp_path / "legend.svg", '<rect width="10" height="10"/>')
        assert SvgDrawingHost().probe_artwork_size(path) == (300.0, 200.0)


class TestOpenDocument:
    """Tests for opening SVG dielines."""

    def test_open_svg(self, tmp_path):
        path = _write_svg(tmp_path / "dieline.svg", '<rect x="42" y="28" width="216" height="144"/>')
        host = SvgDrawingHost()
        host.open_document(path)

        assert host.title == "dieline"
        assert len(host.path_items()) == 1

    def test_open_empty_svg(self, tmp_path):
        host = SvgDrawingHost()
        with pytest.raises(HostOperationFailure, match="No artwork"):
            host.open_document(_write_svg(tmp_path / "empty.svg", ''))

    def test_non_svg_uses_documents(self, tmp_path):
        host = SvgDrawingHost(documents={str(tmp_path / "a.ai"): [[(0, 0), (72, 0), (72, 72)]]})
        host.open_document(tmp_path / "a.ai")
        assert len(host.path_items()) == 1

    def test_upload_workflow(self, tmp_path, proof_config, no_sleep):
        body = '<rect x="42" y="28" width="216" height="144"/><circle cx="20" cy="20" r="5"/>'
        path = _write_svg(tmp_path / "dieline.svg", body)
        host = SvgDrawingHost()

        result = ProofWorkflow(host, proof_config, sleep=no_sleep).run(ProofRequest.upload("Sheets", path))

        assert result.ok
        assert result.width_in == pytest.approx(3)
        assert result.height_in == pytest.approx(2)


class TestSave:
    """Tests for SvgDrawingHost.save on a complete Rolls proof."""

    @pytest.fixture
    def svg_root(self, tmp_path, proof_config, no_sleep):
        host = SvgDrawingHost()
        request = ProofRequest.make("Rolls", 4, 6, add_guidelines=True)
        ProofWorkflow(host, proof_config, sleep=no_sleep).run(request)
        path = host.save(tmp_path / "out" / "LabelProof.svg")
        assert path.exists()
        return ET.parse(path).getroot()

    def _by_id(self, root, item_id):
        for element in root.iter():
            if element.get("id") == item_id:
                return element
        raise AssertionError(f"no element with id {item_id}")

    def test_view_box_is_artboard(self, svg_root):
        assert _numbers(svg_root.get("viewBox")) == [0, 0, 297, 441]
        assert svg_root.get("width") == "297.0pt"

    def test_layers_back_to_front(self, svg_root):
        layers = [e for e in svg_root if _local(e.tag) == "g"]
        assert [e.get("data-layer") for e in layers] == ["White Background", "Art", "Guides"]
        assert layers[0].get("data-locked") == "true"
        assert layers[0].get("id") == "White-Background"

    def test_dieline(self, svg_root):
        dieline = self._by_id(svg_root, "Dieline")
        assert _local(dieline.tag) == "polygon"
        assert dieline.get("stroke") == "#ff00ff"
        assert dieline.get("fill") == "none"
        coords = _numbers(dieline.get("points"))
        assert min(coords[0::2]) == pytest.approx(4.5)
        assert max(coords[0::2]) == pytest.approx(292.5)
        assert min(coords[1::2]) == pytest.approx(4.5)
        assert max(coords[1::2]) == pytest.approx(436.5)

    def test_safezone_dashed(self, svg_root):
        safezone = self._by_id(svg_root, "Safezone")
        assert _numbers(safezone.get("stroke-dasharray")) == [5.0]

    def test_bleed_color(self, svg_root):
        assert self._by_id(svg_root, "Bleed").get("stroke") == "#00ffff"

    def test_arrow_markers(self, svg_root):
        markers = [e for e in svg_root.iter() if _local(e.tag) == "marker"]
        assert len(markers) == 1
        marker_ref = f"url(#{markers[0].get('id')})"

        for group_id in ("Width", "Height"):
            line = next(e for e in self._by_id(svg_root, group_id) if _local(e.tag) == "polyline")
            assert line.get("marker-start") == marker_ref
            assert line.get("marker-end") == marker_ref

    def test_dimension_text(self, svg_root):
        texts = {e.text: e for e in svg_root.iter() if _local(e.tag) == "text"}
        assert set(texts) == {'4.0"', '6.0"'}
        assert texts['4.0"'].get("transform") is None
        assert texts['6.0"'].get("transform").startswith("rotate(-90.00,")
        assert texts['6.0"'].get("font-family") == "MyriadPro-Regular"

    def test_legend_image(self, svg_root):
        images = [e for e in svg_root.iter() if _local(e.tag) == "image"]
        assert len(images) == 1
        assert self._by_id(svg_root, "Legends") is not None
