from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_EVEN, Context, Decimal
from typing import Optional

from tally.domain import arithmetic
from tally.domain.arithmetic import HUNDRED, DecimalLike


@dataclass(frozen=True)
class InterestPolicy:
    division_precision: int = arithmetic.DEFAULT_DIVISION_PRECISION
    # significant digits carried through compounding
    working_precision: int = 50

    def __post_init__(self):
        if self.working_precision < 1:
            raise ValueError(
                f"Working precision must be positive: {self.working_precision}"
            )


class InterestService:
    def __init__(self, policy: Optional[InterestPolicy] = None):
        self._policy = policy or InterestPolicy()

    def simple_interest(
        self, principal: DecimalLike, rate: DecimalLike, time: DecimalLike
    ) -> Decimal:
        """
        Simple interest ``principal * rate * time / 100``.

        :param principal: Principal amount
        :param rate: Rate in percent per period
        :param time: Number of periods

        :return: Interest, not rounded
        """
        return arithmetic.percentage(arithmetic.multiply(principal, rate), time)

    def compound_interest(
        self,
        principal: DecimalLike,
        rate: DecimalLike,
        time: DecimalLike,
        frequency: int = 1,
    ) -> Decimal:
        """
        Interest earned by compounding ``floor(time * frequency)`` times.

        :param principal: Principal amount
        :param rate: Annual rate in percent
        :param time: Duration in years
        :param frequency: Compounding periods per year

        :return: ``principal * (1 + rate / (100 * frequency)) ** periods - principal``, not rounded
        """
        if frequency < 1:
            raise ValueError(f"Compounding frequency must be positive: {frequency}")

        principal = arithmetic.to_decimal(principal)
        rate_per_period = arithmetic.divide(
            rate, arithmetic.multiply(HUNDRED, frequency), self._policy.division_precision
        )
        periods = arithmetic.multiply(time, frequency).to_integral_value(
            rounding=ROUND_FLOOR
        )
        periods = max(0, int(periods))

        context = Context(prec=self._policy.working_precision, rounding=ROUND_HALF_EVEN)
        growth = context.power(arithmetic.add(1, rate_per_period), periods)

        return arithmetic.subtract(arithmetic.multiply(principal, growth), principal)
