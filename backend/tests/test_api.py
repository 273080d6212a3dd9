"""Tests for the FastAPI endpoints."""

from io import StringIO

import ezdxf
import pytest
from fastapi.testclient import TestClient

from cutcost.config import settings
from cutcost.main import app

client = TestClient(app)

SAMPLE_SVG = """<svg xmlns="http://www.w3.org/2000/svg">
  <path d="M0 0 H96 V96 H0 Z"/>
</svg>
"""  # 384 px = 10.16 cm


def _sample_dxf() -> str:
    doc = ezdxf.new("R2010")
    msp = doc.modelspace()
    msp.add_line((0, 0), (30, 40))                    # 50 mm
    msp.add_lwpolyline([(0, 0), (100, 0), (100, 50)])  # 150 mm
    msp.add_circle((0, 0), radius=20)                  # ignored
    stream = StringIO()
    doc.write(stream)
    return stream.getvalue()


class TestHealthEndpoint:
    def test_health(self):
        r = client.get("/api/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestOptionsEndpoint:
    def test_defaults(self):
        r = client.get("/api/options")
        assert r.status_code == 200
        data = r.json()
        assert data["default_unit"] == "cm"
        assert [u["symbol"] for u in data["units"]] == ["mm", "cm", "m", "in", "ft"]
        assert len(data["currencies"]) == 6
        assert len(data["assumptions"]) == 2

    def test_locale_query(self):
        r = client.get("/api/options", params={"locale": "de-DE"})
        assert r.json()["default_currency"] == "EUR"
        assert r.json()["locale"] == "de-DE"

    def test_accept_language(self):
        r = client.get("/api/options", headers={"Accept-Language": "ja-JP,ja;q=0.9"})
        assert r.json()["default_currency"] == "JPY"

    def test_unsupported_locale_currency(self):
        r = client.get("/api/options", params={"locale": "de-CH"})
        assert r.json()["default_currency"] == "IDR"


class TestMeasureEndpoint:
    def test_svg(self):
        r = client.post("/api/measure", files={"files": ("part.svg", SAMPLE_SVG, "image/svg+xml")})
        assert r.status_code == 200
        data = r.json()
        assert data["file_type"] == "SVG"
        assert data["status"] == "measured"
        assert data["length_cm"] == pytest.approx(10.16)
        assert data["warning"] is None

    def test_dxf(self):
        r = client.post("/api/measure", files={"files": ("PART.DXF", _sample_dxf(), "application/dxf")})
        assert r.status_code == 200
        assert r.json()["file_type"] == "DXF"
        assert r.json()["length_cm"] == pytest.approx(20.0)

    def test_zero_length(self):
        svg = '<svg xmlns="http://www.w3.org/2000/svg"><circle r="10"/></svg>'
        r = client.post("/api/measure", files={"files": ("round.svg", svg, "image/svg+xml")})
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "zero_length"
        assert data["length_cm"] == 0
        assert len(data["assumptions"]) == 2

    def test_only_first_file(self):
        r = client.post("/api/measure", files=[
            ("files", ("a.svg", SAMPLE_SVG, "image/svg+xml")),
            ("files", ("b.dxf", _sample_dxf(), "application/dxf")),
        ])
        assert r.status_code == 200
        assert r.json()["file_name"] == "a.svg"

    def test_unsupported_extension(self):
        r = client.post("/api/measure", files={"files": ("part.pdf", b"%PDF-1.4", "application/pdf")})
        assert r.status_code == 415
        assert r.json()["detail"] == "Unsupported file type. Please upload a DXF or SVG file."

    def test_malformed_svg(self):
        r = client.post("/api/measure", files={"files": ("bad.svg", "<svg><path></svg", "image/svg+xml")})
        assert r.status_code == 422

    def test_no_file(self):
        r = client.post("/api/measure")
        assert r.status_code == 422

    def test_malformed_dxf(self):
        r = client.post("/api/measure", files={"files": ("bad.dxf", "this is not a dxf file\n", "application/dxf")})
        assert r.status_code == 422
        assert r.json()["detail"].startswith("Could not read DXF drawing")

    def test_overflowing_length(self):
        svg = '<svg><path d="M0 0 L1e308 0 L-1e308 0"/></svg>'
        r = client.post("/api/measure", files={"files": ("huge.svg", svg, "image/svg+xml")})
        assert r.status_code == 422

    def test_file_too_large(self, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 100)
        r = client.post("/api/measure", files={"files": ("part.svg", SAMPLE_SVG, "image/svg+xml")})
        assert r.status_code == 413

    def test_file_at_limit(self, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", len(SAMPLE_SVG.encode()))
        r = client.post("/api/measure", files={"files": ("part.svg", SAMPLE_SVG, "image/svg+xml")})
        assert r.status_code == 200


class TestEstimateEndpoint:
    def test_cost(self):
        r = client.post("/api/estimate", json={
            "length_cm": 10, "unit": "cm", "price": "5", "currency": "USD", "locale": "en-US",
        })
        assert r.status_code == 200
        data = r.json()
        assert data["length"] == 10
        assert data["length_display"] == "10.00 cm"
        assert data["cost"] == 50
        assert data["cost_display"] == "$50.00"

    def test_numeric_price(self):
        r = client.post("/api/estimate", json={"length_cm": 10, "unit": "mm", "price": 2, "currency": "USD"})
        assert r.json()["cost"] == 200

    def test_no_length(self):
        r = client.post("/api/estimate", json={"length_cm": None, "price": "5"})
        assert r.status_code == 200
        assert r.json() == {"length": None, "length_display": None, "cost": None, "cost_display": None}

    def test_empty_price(self):
        r = client.post("/api/estimate", json={"length_cm": 10, "price": ""})
        data = r.json()
        assert data["length_display"] == "10.00 cm"
        assert data["cost"] is None
        assert data["cost_display"] is None

    def test_invalid_price(self):
        r = client.post("/api/estimate", json={"length_cm": 10, "price": "abc"})
        assert r.status_code == 200
        assert r.json()["cost"] is None

    def test_unknown_unit(self):
        r = client.post("/api/estimate", json={"length_cm": 10, "unit": "yd", "price": "5"})
        assert r.status_code == 422

    def test_unknown_currency(self):
        r = client.post("/api/estimate", json={"length_cm": 10, "price": "5", "currency": "CHF"})
        assert r.status_code == 422


class TestCalculatorEndpoints:
    def _dispatch(self, state, event):
        r = client.post("/api/calculator/dispatch", json={"state": state, "event": event})
        assert r.status_code == 200, r.text
        return r.json()

    def test_initial(self):
        r = client.get("/api/calculator/initial", params={"locale": "en-GB"})
        assert r.status_code == 200
        data = r.json()
        assert data["state"]["currency"] == "GBP"
        assert data["view"]["phase"] == "idle"

    def test_full_workflow(self):
        data = client.get("/api/calculator/initial", params={"locale": "en-US"}).json()
        data = self._dispatch(data["state"], {
            "type": "files_selected",
            "files": [{"name": "part.svg", "content": SAMPLE_SVG}],
        })
        assert data["view"]["phase"] == "measured"
        assert data["view"]["length_display"] == "10.16 cm"

        data = self._dispatch(data["state"], {"type": "unit_selected", "unit": "mm"})
        assert data["view"]["length_display"] == "101.60 mm"

        data = self._dispatch(data["state"], {"type": "price_edited", "text": "2"})
        assert data["view"]["cost"] == pytest.approx(203.2)
        assert data["view"]["cost_display"] == "$203.20"

        data = self._dispatch(data["state"], {"type": "file_removed"})
        assert data["state"]["length_cm"] is None
        assert data["view"]["phase"] == "idle"
        assert data["view"]["cost_display"] is None

    def test_zero_length_file(self):
        data = self._dispatch({}, {
            "type": "files_selected",
            "files": [{"name": "empty.svg", "content": "<svg/>"}],
        })
        assert data["view"]["phase"] == "zero_length"
        assert data["view"]["controls_visible"] is False
        assert len(data["view"]["assumptions"]) == 2

    def test_invalid_price_reports_no_cost(self):
        state = {"length_cm": 10, "file_kind": "DXF", "file_name": "a.dxf", "currency": "USD"}
        data = self._dispatch(state, {"type": "price_edited", "text": "abc"})
        assert data["view"]["cost"] is None
        assert data["view"]["cost_display"] is None

    def test_unsupported_file(self):
        r = client.post("/api/calculator/dispatch", json={
            "state": {},
            "event": {"type": "files_selected", "files": [{"name": "a.txt", "content": "x"}]},
        })
        assert r.status_code == 415

    def test_unknown_unit(self):
        r = client.post("/api/calculator/dispatch", json={
            "state": {},
            "event": {"type": "unit_selected", "unit": "yd"},
        })
        assert r.status_code == 422

    def test_unknown_event_type(self):
        r = client.post("/api/calculator/dispatch", json={"state": {}, "event": {"type": "reset"}})
        assert r.status_code == 422

    def test_malformed_dxf(self):
        r = client.post("/api/calculator/dispatch", json={
            "state": {},
            "event": {"type": "files_selected", "files": [{"name": "bad.dxf", "content": "this is not a dxf file\n"}]},
        })
        assert r.status_code == 422
        assert r.json()["detail"].startswith("Could not read DXF drawing")

    def test_file_too_large(self, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 100)
        r = client.post("/api/calculator/dispatch", json={
            "state": {},
            "event": {"type": "files_selected", "files": [{"name": "part.svg", "content": SAMPLE_SVG}]},
        })
        assert r.status_code == 413


class TestAppSettings:
    def test_debug_follows_settings(self):
        assert app.debug is settings.debug
