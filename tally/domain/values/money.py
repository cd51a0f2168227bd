from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from tally.domain import arithmetic
from tally.domain.arithmetic import DecimalLike
from tally.domain.exceptions import CurrencyMismatchError

from .currency import Currency


@dataclass(frozen=True)
class Money:
    """
    An exact amount in one currency.

    Arithmetic never rounds; rounding to the currency scale is done
    explicitly through the rounding service.
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", arithmetic.to_decimal(self.amount))

        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))

    @classmethod
    def of(cls, amount: DecimalLike, currency: Union[Currency, str]) -> "Money":
        return cls(arithmetic.to_decimal(amount), Currency(str(currency)))

    @classmethod
    def zero(cls, currency: Union[Currency, str]) -> "Money":
        return cls.of(0, currency)

    def __add__(self, other: "Money") -> "Money":
        self._check_same_currency(other, "add")
        return Money(arithmetic.add(self.amount, other.amount), self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_same_currency(other, "subtract")
        return Money(arithmetic.subtract(self.amount, other.amount), self.currency)

    def __neg__(self) -> "Money":
        return Money(self.amount.copy_negate(), self.currency)

    def __abs__(self) -> "Money":
        return Money(self.amount.copy_abs(), self.currency)

    def __lt__(self, other: "Money") -> bool:
        self._check_same_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_same_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._check_same_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._check_same_currency(other, "compare")
        return self.amount >= other.amount

    def multiply(self, factor: DecimalLike) -> "Money":
        return Money(arithmetic.multiply(self.amount, factor), self.currency)

    def divide(
        self,
        divisor: DecimalLike,
        precision: int = arithmetic.DEFAULT_DIVISION_PRECISION,
    ) -> "Money":
        """
        :raises DivisionByZeroError: if the divisor is zero
        """
        return Money(arithmetic.divide(self.amount, divisor, precision), self.currency)

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def _check_same_currency(self, other: "Money", operation: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(
                f"Cannot {operation} Money and {type(other).__name__}"
            )
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                self.currency.code, other.currency.code, operation
            )
