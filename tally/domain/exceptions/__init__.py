from .base import DomainException
from .distribution import (
    DistributionError,
    InvalidDistributionError,
    ResidualRedistributionError,
)
from .money import (
    CurrencyMismatchError,
    DivisionByZeroError,
    InvalidAmountError,
    MoneyError,
)

__all__ = [
    "DomainException",
    "MoneyError",
    "InvalidAmountError",
    "DivisionByZeroError",
    "CurrencyMismatchError",
    "DistributionError",
    "InvalidDistributionError",
    "ResidualRedistributionError",
]
