"""
Unit tests for label_proof.hosts.dxf module.

Tests:
- DXF document creation and proof layers
- Polyline and text entities
- Exporting a complete proof document
"""

from pathlib import Path

import pytest

try:
    import ezdxf
    HAS_EZDXF = True
except ImportError:
    HAS_EZDXF = False

pytestmark = pytest.mark.skipif(not HAS_EZDXF, reason="ezdxf not installed")

from label_proof.hosts.dxf import PROOF_LAYERS, DxfExporter, export_dxf
from label_proof.hosts.memory import MemoryDrawingHost
from label_proof.request import ProofRequest
from label_proof.workflow import ProofWorkflow


class TestDxfExporter:
    """Tests for DxfExporter class."""

    def test_create_drawing(self):
        exporter = DxfExporter()
        exporter.create_drawing(4, 6)

        assert exporter.doc is not None
        assert exporter.msp is not None
        assert exporter.doc.units == ezdxf.units.IN

    def test_proof_layers_created(self):
        exporter = DxfExporter()
        exporter.create_drawing(4, 6)

        for name, props in PROOF_LAYERS.items():
            layer = exporter.doc.layers.get(name)
            assert layer.color == props['color']
            assert layer.dxf.linetype == props['linetype']

    def test_requires_drawing(self):
        with pytest.raises(RuntimeError, match="Drawing not created"):
            DxfExporter().add_polyline([(0, 0), (1, 1)])

    def test_add_polyline(self):
        exporter = DxfExporter()
        exporter.create_drawing(4, 6)
        exporter.add_polyline([(0, 0), (4, 0), (4, 6), (0, 6)], closed=True, layer='DIELINE')

        polylines = exporter.msp.query('LWPOLYLINE')
        assert len(polylines) == 1
        assert polylines[0].closed
        assert polylines[0].dxf.layer == 'DIELINE'

    def test_single_point_skipped(self):
        exporter = DxfExporter()
        exporter.create_drawing(4, 6)
        exporter.add_polyline([(0, 0)])
        assert len(exporter.msp.query('LWPOLYLINE')) == 0

    def test_add_text(self):
        exporter = DxfExporter()
        exporter.create_drawing(4, 6)
        exporter.add_text('6.0"', (1, 2), height=0.1667, rotation=90)

        text = exporter.msp.query('TEXT')[0]
        assert text.dxf.text == '6.0"'
        assert text.dxf.rotation == 90
        assert text.dxf.layer == 'DIMENSIONS'

    def test_save(self, tmp_path):
        exporter = DxfExporter()
        exporter.create_drawing(4, 6)
        exporter.add_polyline([(0, 0), (4, 0)])
        path = exporter.save(tmp_path / "nested" / "proof.dxf")

        assert path.exists()
        assert ezdxf.readfile(str(path)).modelspace().query('LWPOLYLINE')


class TestExportDxf:
    """Tests for export_dxf on a complete Rolls proof."""

    @pytest.fixture
    def dxf_doc(self, tmp_path, proof_config, no_sleep):
        host = MemoryDrawingHost()
        request = ProofRequest.make("Rolls", 4, 6, add_guidelines=True)
        ProofWorkflow(host, proof_config, sleep=no_sleep).run(request)
        path = export_dxf(host, tmp_path / "LabelProof.dxf")
        return ezdxf.readfile(str(path))

    def _layers(self, doc, query):
        return sorted(e.dxf.layer for e in doc.modelspace().query(query))

    def test_polyline_layers(self, dxf_doc):
        assert self._layers(dxf_doc, 'LWPOLYLINE') == [
            'BACKER', 'BLEED', 'DIELINE', 'DIMENSIONS', 'DIMENSIONS', 'SAFEZONE',
        ]

    def test_dieline_in_inches(self, dxf_doc):
        dieline = dxf_doc.modelspace().query('LWPOLYLINE[layer=="DIELINE"]')[0]
        xs = [p[0] for p in dieline.get_points('xy')]
        ys = [p[1] for p in dieline.get_points('xy')]

        assert dieline.closed
        assert min(xs) == pytest.approx(0.0625)
        assert max(xs) == pytest.approx(4.0625)
        assert min(ys) == pytest.approx(0.0625)
        assert max(ys) == pytest.approx(6.0625)

    def test_dimension_text(self, dxf_doc):
        texts = {e.dxf.text: e for e in dxf_doc.modelspace().query('TEXT')}

        assert set(texts) == {'4.0"', '6.0"'}
        assert texts['4.0"'].dxf.rotation == 0
        assert texts['6.0"'].dxf.rotation == 90
        assert texts['6.0"'].dxf.height == pytest.approx(12 / 72)
        assert {e.dxf.layer for e in texts.values()} == {'DIMENSIONS'}

    def test_legend_skipped(self, dxf_doc):
        assert len(dxf_doc.modelspace().query('IMAGE')) == 0
