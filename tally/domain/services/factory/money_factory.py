from decimal import Decimal

from tally.domain import arithmetic
from tally.domain.arithmetic import DecimalLike
from tally.domain.exceptions import CurrencyMismatchError
from tally.domain.services.currency_registry import CurrencyCode
from tally.domain.services.rounding_service import RoundingService
from tally.domain.values import Money


class MoneyFactory:
    def __init__(self, rounding_service: RoundingService):
        self._rounding = rounding_service

    def create(
        self, value: DecimalLike, currency: CurrencyCode = None, auto_round: bool = True
    ) -> Money:
        """
        Build a money value, rounded to its currency scale unless ``auto_round`` is off.

        :param value: Amount
        :param currency: Currency code (default currency if omitted)
        :param auto_round: Round to the currency scale with its default mode
        """
        code = self._rounding.registry.resolve_code(currency)
        amount = arithmetic.to_decimal(value)

        if auto_round:
            amount = self._rounding.round_for_currency(amount, code)

        return Money(amount, code)

    def from_string(self, value: str, currency: CurrencyCode = None) -> Money:
        return self.create(arithmetic.to_decimal(value), currency)

    def from_float(self, value: float, currency: CurrencyCode = None) -> Money:
        return self.create(Decimal(str(value)), currency)

    def add(self, a: Money, b: Money) -> Money:
        """
        Sum two money values of the same currency.

        The sum is rounded if either operand sits on the currency scale.

        :raises CurrencyMismatchError: if the currencies differ
        """
        if a.currency != b.currency:
            raise CurrencyMismatchError(a.currency.code, b.currency.code, "add")

        auto_round = self._is_rounded(a) or self._is_rounded(b)

        return self.create(arithmetic.add(a.amount, b.amount), a.currency, auto_round)

    def _is_rounded(self, money: Money) -> bool:
        scale = self._rounding.registry.scale_of(money.currency)
        return money.amount == self._rounding.round(money.amount, scale)
