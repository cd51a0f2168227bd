from types import MappingProxyType
from typing import Union

from tally.domain.values import (
    DEFAULT_ROUNDING_MODE,
    DEFAULT_SCALE,
    Currency,
    CurrencyConfig,
    RoundingMode,
)

DEFAULT_CURRENCY_CODE = "INR"

# code, symbol, scale, locale, smallest unit
CURRENCY_TABLE: tuple[tuple[str, str, int, str, str], ...] = (
    ("INR", "₹", 2, "en-IN", "paise"),
    ("USD", "$", 2, "en-US", "cents"),
    ("EUR", "€", 2, "de-DE", "cents"),
    ("GBP", "£", 2, "en-GB", "pence"),
    # Asia-Pacific
    ("AUD", "A$", 2, "en-AU", "cents"),
    ("SGD", "S$", 2, "en-SG", "cents"),
    ("JPY", "¥", 0, "ja-JP", "yen"),
    ("CNY", "¥", 2, "zh-CN", "fen"),
    ("HKD", "HK$", 2, "zh-HK", "cents"),
    ("THB", "฿", 2, "th-TH", "satang"),
    ("MYR", "RM", 2, "ms-MY", "sen"),
    # IDR has a minor unit on paper but is never quoted with one
    ("IDR", "Rp", 0, "id-ID", "sen"),
    ("PHP", "₱", 2, "en-PH", "centavo"),
    ("VND", "₫", 0, "vi-VN", "xu"),
    ("KRW", "₩", 0, "ko-KR", "jeon"),
    ("TWD", "NT$", 2, "zh-TW", "cents"),
    ("NZD", "NZ$", 2, "en-NZ", "cents"),
    # Middle East
    ("AED", "د.إ", 2, "ar-AE", "fils"),
    ("SAR", "﷼", 2, "ar-SA", "halala"),
    ("QAR", "﷼", 2, "ar-QA", "dirham"),
    ("KWD", "د.ك", 3, "ar-KW", "fils"),
    ("BHD", ".د.ب", 3, "ar-BH", "fils"),
    ("OMR", "﷼", 3, "ar-OM", "baisa"),
    # Americas
    ("CAD", "C$", 2, "en-CA", "cents"),
    ("MXN", "$", 2, "es-MX", "centavos"),
    ("BRL", "R$", 2, "pt-BR", "centavos"),
    # Europe
    ("CHF", "CHF", 2, "de-CH", "rappen"),
    ("SEK", "kr", 2, "sv-SE", "öre"),
    ("NOK", "kr", 2, "nb-NO", "øre"),
    ("DKK", "kr", 2, "da-DK", "øre"),
    ("PLN", "zł", 2, "pl-PL", "grosz"),
    ("CZK", "Kč", 2, "cs-CZ", "haléř"),
    ("RUB", "₽", 2, "ru-RU", "kopek"),
    ("TRY", "₺", 2, "tr-TR", "kuruş"),
    # Africa
    ("ZAR", "R", 2, "en-ZA", "cents"),
    ("EGP", "£", 2, "ar-EG", "piastres"),
    ("NGN", "₦", 2, "en-NG", "kobo"),
    ("KES", "KSh", 2, "en-KE", "cents"),
    # South Asia
    ("LKR", "Rs", 2, "si-LK", "cents"),
    ("PKR", "Rs", 2, "ur-PK", "paisa"),
    ("BDT", "৳", 2, "bn-BD", "poisha"),
    ("NPR", "Rs", 2, "ne-NP", "paisa"),
    ("MVR", "Rf", 2, "dv-MV", "laari"),
)

CurrencyCode = Union[str, Currency, None]


class CurrencyRegistry:
    """
    Read-only lookup of currency metadata by code.

    Lookups are case-insensitive. Unknown codes are not an error: they get
    the default scale and rounding mode, which only affects precision.
    """

    def __init__(
        self,
        default_currency: str = DEFAULT_CURRENCY_CODE,
        default_scale: int = DEFAULT_SCALE,
        default_rounding_mode: RoundingMode = DEFAULT_ROUNDING_MODE,
        table: tuple[tuple[str, str, int, str, str], ...] = CURRENCY_TABLE,
    ):
        if default_scale < 0:
            raise ValueError(f"Default scale cannot be negative: {default_scale}")

        self._default_scale = default_scale
        self._default_rounding_mode = RoundingMode.parse(default_rounding_mode)
        self._configs = MappingProxyType(
            {
                code: CurrencyConfig(
                    code=code,
                    scale=scale,
                    rounding_mode=self._default_rounding_mode,
                    symbol=symbol,
                    locale=locale,
                    smallest_unit=smallest_unit,
                    name=code,
                )
                for code, symbol, scale, locale, smallest_unit in table
            }
        )
        self._default_currency = Currency(default_currency).code

    @property
    def default_currency(self) -> str:
        return self._default_currency

    @property
    def default_scale(self) -> int:
        return self._default_scale

    @property
    def default_rounding_mode(self) -> RoundingMode:
        return self._default_rounding_mode

    def resolve_code(self, currency: CurrencyCode) -> str:
        """Upper-cased code; blank or missing codes resolve to the default currency."""
        code = str(currency).strip().upper() if currency is not None else ""

        return code or self._default_currency

    def get(self, currency: CurrencyCode) -> CurrencyConfig:
        code = self.resolve_code(currency)
        config = self._configs.get(code)

        if config is not None:
            return config

        return CurrencyConfig(
            code=code,
            scale=self._default_scale,
            rounding_mode=self._default_rounding_mode,
            symbol=code,
            locale="en-US",
            smallest_unit="cents",
            name=code,
        )

    def is_supported(self, currency: CurrencyCode) -> bool:
        return self.resolve_code(currency) in self._configs

    def scale_of(self, currency: CurrencyCode) -> int:
        return self.get(currency).scale

    def symbol_of(self, currency: CurrencyCode) -> str:
        return self.get(currency).symbol

    def rounding_mode_of(self, currency: CurrencyCode) -> RoundingMode:
        return self.get(currency).rounding_mode

    def codes(self) -> tuple[str, ...]:
        return tuple(self._configs)
