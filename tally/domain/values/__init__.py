from .currency import Currency, CurrencyConfig
from .money import Money
from .rounding import (
    DEFAULT_ROUNDING_MODE,
    DEFAULT_SCALE,
    RoundingAdjustment,
    RoundingMode,
    TotalAdjustment,
)

__all__ = [
    "Currency",
    "CurrencyConfig",
    "Money",
    "RoundingMode",
    "RoundingAdjustment",
    "TotalAdjustment",
    "DEFAULT_ROUNDING_MODE",
    "DEFAULT_SCALE",
]
