import pytest

from tally.shared.config import get_settings


def _reset_settings_cache():
    get_settings.cache_clear()


def test_settings_normalize_log_level_currency_and_mode(monkeypatch):
    # Given
    _reset_settings_cache()
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DEFAULT_CURRENCY", " usd ")
    monkeypatch.setenv("DEFAULT_ROUNDING_MODE", "round_ceil")

    # When
    s = get_settings()

    # Then
    assert s.LOG_LEVEL == "DEBUG"
    assert s.DEFAULT_CURRENCY == "USD"
    assert s.DEFAULT_ROUNDING_MODE == "CEILING"


def test_settings_defaults(monkeypatch):
    # Given
    _reset_settings_cache()
    for name in ("DEFAULT_SCALE", "DIVISION_PRECISION", "UNIT_PRICE_PRECISION"):
        monkeypatch.delenv(name, raising=False)

    # When
    s = get_settings()

    # Then
    assert s.DEFAULT_SCALE == 2
    assert s.DIVISION_PRECISION == 20
    assert s.UNIT_PRICE_PRECISION == 10


def test_settings_rejects_unknown_log_level(monkeypatch):
    # Given
    _reset_settings_cache()
    monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

    # When & Then
    with pytest.raises(Exception):
        get_settings()


def test_settings_rejects_unknown_rounding_mode(monkeypatch):
    # Given
    _reset_settings_cache()
    monkeypatch.setenv("DEFAULT_ROUNDING_MODE", "BANKERS")

    # When & Then
    with pytest.raises(Exception):
        get_settings()


def test_settings_rejects_out_of_range_scale(monkeypatch):
    # Given
    _reset_settings_cache()
    monkeypatch.setenv("DEFAULT_SCALE", "-1")

    # When & Then
    with pytest.raises(Exception):
        get_settings()


def test_unit_price_precision_cannot_exceed_division_precision(monkeypatch):
    # Given
    _reset_settings_cache()
    monkeypatch.setenv("DIVISION_PRECISION", "8")
    monkeypatch.setenv("UNIT_PRICE_PRECISION", "10")

    # When & Then
    with pytest.raises(Exception):
        get_settings()
