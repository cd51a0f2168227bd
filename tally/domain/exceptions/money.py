from decimal import Decimal
from typing import Any

from .base import DomainException


class MoneyError(DomainException):
    pass


class InvalidAmountError(MoneyError, ValueError):
    """Raised when a value cannot be read as an exact decimal."""

    def __init__(self, value: Any, reason: str = "not a decimal number"):
        self.value = value

        super().__init__(f"Invalid amount {value!r}: {reason}")


class DivisionByZeroError(MoneyError, ZeroDivisionError):
    """Raised by every division whose divisor is zero. Never recovered locally."""

    def __init__(self, dividend: Decimal):
        self.dividend = dividend

        super().__init__(f"Division by zero (dividend: {dividend})")


class CurrencyMismatchError(MoneyError):
    """Raised when two currency-scoped values with different codes are combined."""

    def __init__(self, left: str, right: str, operation: str = "combine"):
        self.left = left
        self.right = right

        super().__init__(f"Cannot {operation} different currencies: {left} and {right}")
