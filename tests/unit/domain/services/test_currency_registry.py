from decimal import Decimal

import pytest

from tally.domain.services.currency_registry import CURRENCY_TABLE, CurrencyRegistry
from tally.domain.values import Currency, RoundingMode


def test_known_currency_lookup_is_case_insensitive():
    registry = CurrencyRegistry()

    config = registry.get("usd")

    assert config.code == "USD"
    assert config.scale == 2
    assert config.symbol == "$"
    assert config.smallest_unit == "cents"
    assert config.currency == Currency("USD")


@pytest.mark.parametrize(
    "code, scale",
    [("INR", 2), ("JPY", 0), ("KRW", 0), ("IDR", 0), ("KWD", 3), ("BHD", 3), ("OMR", 3)],
)
def test_currency_scales(code, scale):
    assert CurrencyRegistry().scale_of(code) == scale


def test_missing_or_blank_code_resolves_to_default_currency():
    registry = CurrencyRegistry()

    assert registry.resolve_code(None) == "INR"
    assert registry.resolve_code("  ") == "INR"
    assert registry.resolve_code(" eur ") == "EUR"
    assert registry.resolve_code(Currency("gbp")) == "GBP"
    assert registry.get(None).symbol == "₹"


def test_unknown_currency_gets_defaults():
    registry = CurrencyRegistry()

    config = registry.get("xyz")

    assert registry.is_supported("xyz") is False
    assert config.code == "XYZ"
    assert config.scale == 2
    assert config.symbol == "XYZ"
    assert config.rounding_mode is RoundingMode.HALF_EVEN


def test_defaults_are_configurable():
    registry = CurrencyRegistry(
        default_currency="usd", default_scale=4, default_rounding_mode="ROUND_HALF_UP"
    )

    assert registry.default_currency == "USD"
    assert registry.scale_of("XYZ") == 4
    assert registry.rounding_mode_of("XYZ") is RoundingMode.HALF_UP
    assert registry.rounding_mode_of("INR") is RoundingMode.HALF_UP
    # table scales are not overridden
    assert registry.scale_of("JPY") == 0


def test_negative_default_scale_is_rejected():
    with pytest.raises(ValueError):
        CurrencyRegistry(default_scale=-1)


def test_codes_cover_the_whole_table():
    registry = CurrencyRegistry()

    assert len(registry.codes()) == len(CURRENCY_TABLE)
    assert all(registry.is_supported(code) for code in registry.codes())


def test_table_has_unique_codes_and_valid_scales():
    codes = [row[0] for row in CURRENCY_TABLE]

    assert len(codes) == len(set(codes))
    assert all(0 <= row[2] <= 3 for row in CURRENCY_TABLE)
    assert Decimal(1).scaleb(-CurrencyRegistry().scale_of("KWD")) == Decimal("0.001")
