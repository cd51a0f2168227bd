import importlib

import tally.adapters.inbound.api.app as app_module
from fastapi.testclient import TestClient


def _build_app():
    return importlib.reload(app_module).app


def test_calculate_derived_line():
    app = _build_app()
    with TestClient(app) as client:
        resp = client.post(
            "/line-items",
            json={"unit_price": "1000", "quantity": 2, "tax_rate": "18"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["calculated"] == {
            "gross_amount": "2000.00",
            "taxable_amount": "2000.00",
            "tax_amount": "360.00",
            "total": "2360.00",
        }
        assert data["rounding_adjustment"] == "0.00"
        assert data["has_adjustment"] is False
        assert data["validation_errors"] == []
        assert data["exact_unit_price"] is None


def test_calculate_clamps_invalid_inputs():
    app = _build_app()
    with TestClient(app) as client:
        resp = client.post(
            "/line-items",
            json={"unit_price": "10", "quantity": 0, "tax_rate": "18"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["input"]["quantity"] == 1
        assert data["validation_errors"] == ["Quantity must be at least 1"]


def test_entered_total_books_rounding_adjustment():
    app = _build_app()
    with TestClient(app) as client:
        resp = client.post(
            "/line-items/from-total",
            json={"total": "1000", "quantity": 3, "tax_rate": "18"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["exact_unit_price"] == "282.4866666666"
        assert data["displayed_unit_price"] == "282.49"
        assert data["recomputed_total"] == "1000.01"
        assert data["calculated"]["total"] == "1000.00"
        assert data["rounding_adjustment"] == "-0.01"
        assert data["has_adjustment"] is True


def test_rejects_malformed_currency():
    app = _build_app()
    with TestClient(app) as client:
        resp = client.post(
            "/line-items",
            json={"unit_price": "1", "quantity": 1, "tax_rate": "0", "currency": "US$"},
        )
        assert resp.status_code == 422
