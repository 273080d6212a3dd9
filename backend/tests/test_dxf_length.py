"""Tests for the DXF length extractor."""

from io import StringIO

import ezdxf
import pytest

from cutcost.core.measure.dxf_length import (
    DrawingEntity,
    calculate_dxf_length,
    collect_entities,
    dxf_path_length,
    entity_length,
    read_dxf,
)
from cutcost.core.measure.errors import DrawingParseError


def _dxf_text(doc) -> str:
    stream = StringIO()
    doc.write(stream)
    return stream.getvalue()


@pytest.fixture
def doc():
    return ezdxf.new("R2010")


class TestEntityLength:
    def test_line_pythagorean(self):
        line = DrawingEntity("LINE", start=(0, 0, 0), end=(3, 4, 0))
        assert entity_length(line) == 5.0

    def test_line_is_symmetric(self):
        a = DrawingEntity("LINE", start=(1.5, -2, 0), end=(7, 11.25, 0))
        b = DrawingEntity("LINE", start=(7, 11.25, 0), end=(1.5, -2, 0))
        assert entity_length(a) == entity_length(b)

    def test_line_ignores_z(self):
        line = DrawingEntity("LINE", start=(0, 0, 0), end=(3, 4, 100))
        assert entity_length(line) == 5.0

    def test_line_missing_endpoint(self):
        assert entity_length(DrawingEntity("LINE", start=(0, 0, 0))) == 0

    def test_polyline_sums_consecutive_segments(self):
        pl = DrawingEntity("LWPOLYLINE", vertices=((0, 0), (10, 0), (10, 10), (0, 10)))
        assert entity_length(pl) == 30.0  # open: no closing segment

    def test_single_vertex_polyline(self):
        assert entity_length(DrawingEntity("LWPOLYLINE", vertices=((5, 5),))) == 0

    def test_polyline_without_vertices(self):
        assert entity_length(DrawingEntity("LWPOLYLINE")) == 0

    @pytest.mark.parametrize("kind", ["ARC", "CIRCLE", "SPLINE", "TEXT"])
    def test_unsupported_entities(self, kind):
        assert entity_length(DrawingEntity(kind)) == 0

    def test_total(self):
        entities = [
            DrawingEntity("LINE", start=(0, 0, 0), end=(3, 4, 0)),
            DrawingEntity("CIRCLE"),
            DrawingEntity("LWPOLYLINE", vertices=((0, 0), (0, 2))),
        ]
        assert dxf_path_length(entities) == 7.0


class TestReadDxf:
    def test_collects_lines_and_polylines(self, doc):
        msp = doc.modelspace()
        msp.add_line((0, 0), (30, 40))
        msp.add_lwpolyline([(0, 0), (10, 0), (10, 10)])
        msp.add_circle((0, 0), radius=5)

        entities = collect_entities(read_dxf(_dxf_text(doc)))
        kinds = sorted(e.kind for e in entities)
        assert kinds == ["CIRCLE", "LINE", "LWPOLYLINE"]

    def test_paperspace_entities_included(self, doc):
        doc.layout("Layout1").add_line((0, 0), (0, 10))
        entities = collect_entities(read_dxf(_dxf_text(doc)))
        assert any(e.kind == "LINE" for e in entities)

    def test_garbage_raises_parse_error(self):
        with pytest.raises(DrawingParseError):
            read_dxf("this is not a dxf file\n")


class TestCalculateDxfLength:
    def test_millimeters_to_centimeters(self, doc):
        doc.modelspace().add_line((0, 0), (30, 40))  # 50 mm
        assert calculate_dxf_length(_dxf_text(doc)) == pytest.approx(5.0)

    def test_closed_polyline_measured_open(self, doc):
        doc.modelspace().add_lwpolyline([(0, 0), (100, 0), (100, 100), (0, 100)], close=True)
        assert calculate_dxf_length(_dxf_text(doc)) == pytest.approx(30.0)

    def test_only_arcs_is_zero(self, doc):
        msp = doc.modelspace()
        msp.add_arc((0, 0), radius=10, start_angle=0, end_angle=90)
        msp.add_circle((0, 0), radius=10)
        assert calculate_dxf_length(_dxf_text(doc)) == 0

    def test_empty_drawing(self, doc):
        assert calculate_dxf_length(_dxf_text(doc)) == 0

    def test_unit_scale(self, doc):
        doc.modelspace().add_line((0, 0), (1, 0))  # 1 inch if units are inches
        assert calculate_dxf_length(_dxf_text(doc), mm_per_unit=25.4) == pytest.approx(2.54)
