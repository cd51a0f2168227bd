import importlib

import tally.adapters.inbound.api.app as app_module
from fastapi.testclient import TestClient
from tally.shared.config import get_settings


def _build_app(monkeypatch, enabled: bool):
    monkeypatch.setenv("ENABLE_METRICS", "true" if enabled else "false")
    get_settings.cache_clear()

    return importlib.reload(app_module).app


def test_metrics_disabled(monkeypatch):
    app = _build_app(monkeypatch, enabled=False)
    with TestClient(app) as client:
        resp = client.get("/metrics")
        assert resp.status_code == 404


def test_metrics_count_calculations_and_adjustments(monkeypatch):
    app = _build_app(monkeypatch, enabled=True)
    with TestClient(app) as client:
        client.post("/rounding/round", json={"value": "1.005"})
        client.post("/allocations/distribute", json={"total": "10", "parts": 0})
        client.post("/allocations/allocate", json={"total": "10", "weights": ["0"]})

        resp = client.get("/metrics")
        assert resp.status_code == 200
        body = resp.text
        assert 'calculations_total{operation="round",status="success"} 1.0' in body
        assert 'rounding_adjustments_total{operation="round"} 1.0' in body
        assert (
            'calculations_total{operation="allocate",status="DivisionByZeroError"} 1.0'
            in body
        )
        assert "http_requests_total" in body
