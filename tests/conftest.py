import pytest


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("JSON_LOGS", "false")
    monkeypatch.setenv("ENABLE_METRICS", "false")
    monkeypatch.setenv("DEFAULT_CURRENCY", "INR")
    monkeypatch.setenv("DEFAULT_SCALE", "2")
    monkeypatch.setenv("DEFAULT_ROUNDING_MODE", "HALF_EVEN")
    monkeypatch.setenv("DIVISION_PRECISION", "20")
    monkeypatch.setenv("UNIT_PRICE_PRECISION", "10")
    monkeypatch.setenv("MAX_DISTRIBUTION_PARTS", "10000")

    from tally.shared.config import get_settings

    get_settings.cache_clear()
