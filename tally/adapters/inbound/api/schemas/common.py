from typing import Optional

from tally.domain.values import Currency, RoundingMode


def validate_currency_code(value: Optional[str]) -> Optional[str]:
    """Upper-cased currency code; blank codes become ``None`` (default currency)."""
    if value is None or not value.strip():
        return None

    return Currency(value.strip()).code


def validate_rounding_mode(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None

    return RoundingMode.parse(value).value
