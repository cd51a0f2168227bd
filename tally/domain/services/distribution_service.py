from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from tally.domain import arithmetic
from tally.domain.arithmetic import DecimalLike
from tally.domain.exceptions import (
    InvalidDistributionError,
    ResidualRedistributionError,
)
from tally.domain.values import Money, RoundingMode
from tally.shared.logging import get_logger

from .currency_registry import CurrencyCode
from .rounding_service import RoundingService

logger = get_logger(__name__)


@dataclass(frozen=True)
class DistributionPolicy:
    max_parts: int = 10_000
    division_precision: int = arithmetic.DEFAULT_DIVISION_PRECISION
    # redistribution steps allowed per part before the residual is a defect
    iterations_per_part: int = 10

    def __post_init__(self):
        if self.max_parts < 1:
            raise ValueError(f"Max parts must be positive: {self.max_parts}")
        if self.iterations_per_part < 1:
            raise ValueError(
                f"Iterations per part must be positive: {self.iterations_per_part}"
            )


class DistributionService:
    """
    Splits totals into rounded parts that always sum back to the total.

    Every part is rounded at the currency scale first; the residual left by
    rounding is then handed out one minor unit at a time, in ascending index
    order, wrapping around.
    """

    def __init__(
        self,
        rounding_service: RoundingService,
        policy: Optional[DistributionPolicy] = None,
    ):
        self._rounding = rounding_service
        self._policy = policy or DistributionPolicy()

    def distribute(
        self, total: DecimalLike, parts: int, currency: CurrencyCode = None
    ) -> list[Decimal]:
        """
        Split a total into ``parts`` shares that are as equal as possible.

        :param total: Amount to split, at currency scale
        :param parts: Number of shares
        :param currency: Currency code deciding the scale (default currency if omitted)

        :return: ``parts`` shares summing exactly to ``total``

        :raises InvalidDistributionError: if ``parts`` is below 1 or above the limit,
            or ``total`` has more fractional digits than the currency scale
        """
        self._check_part_count(parts)

        total = arithmetic.to_decimal(total)
        config = self._rounding.registry.get(currency)
        self._check_total(total, config.scale)

        share = self._rounding.round(
            arithmetic.divide(total, parts, self._policy.division_precision),
            config.scale,
            config.rounding_mode,
        )

        return self._redistribute([share] * parts, total, config.scale)

    def allocate(
        self,
        total: DecimalLike,
        weights: Sequence[DecimalLike],
        currency: CurrencyCode = None,
    ) -> list[Decimal]:
        """
        Split a total proportionally to ``weights``.

        :return: One share per weight, summing exactly to ``total``

        :raises InvalidDistributionError: for empty, oversized or negative weights,
            or a ``total`` finer than the currency scale
        :raises DivisionByZeroError: if the weights sum to zero
        """
        if not weights:
            raise InvalidDistributionError("weights cannot be empty")
        self._check_part_count(len(weights))

        weights = [arithmetic.to_decimal(w) for w in weights]
        if any(w < 0 for w in weights):
            raise InvalidDistributionError("weights cannot be negative")

        total = arithmetic.to_decimal(total)
        weight_sum = arithmetic.total(weights)
        config = self._rounding.registry.get(currency)
        self._check_total(total, config.scale)

        shares = [
            self._rounding.round(
                arithmetic.divide(
                    arithmetic.multiply(total, weight),
                    weight_sum,
                    self._policy.division_precision,
                ),
                config.scale,
                config.rounding_mode,
            )
            for weight in weights
        ]

        return self._redistribute(shares, total, config.scale)

    def resolve_currency(self, currency: CurrencyCode) -> str:
        return self._rounding.registry.resolve_code(currency)

    def distribute_money(self, money: Money, parts: int) -> list[Money]:
        return [
            Money(amount, money.currency)
            for amount in self.distribute(money.amount, parts, money.currency)
        ]

    def allocate_money(
        self, money: Money, weights: Sequence[DecimalLike]
    ) -> list[Money]:
        return [
            Money(amount, money.currency)
            for amount in self.allocate(money.amount, weights, money.currency)
        ]

    def distribute_rounding_adjustment(
        self,
        values: Sequence[DecimalLike],
        target_total: DecimalLike,
        scale: Optional[int] = None,
    ) -> list[Decimal]:
        """
        Round each value, then nudge them so they foot to ``target_total``.

        Used to reconcile already-computed line values against a total that
        was rounded on its own.

        :raises InvalidDistributionError: if ``target_total`` is finer than ``scale``
        :raises ResidualRedistributionError: if the rounded values are too far from
            ``target_total`` to close the gap within the step limit
        """
        if not values:
            return []

        scale = self._rounding.policy.scale if scale is None else scale
        target_total = arithmetic.to_decimal(target_total)
        self._check_total(target_total, scale)

        rounded = [self._rounding.round(value, scale) for value in values]

        return self._redistribute(rounded, target_total, scale)

    def _redistribute(
        self, parts: list[Decimal], total: Decimal, scale: int
    ) -> list[Decimal]:
        residual = arithmetic.subtract(total, arithmetic.total(parts))

        if residual == 0:
            return parts

        unit = Decimal(1).scaleb(-scale)
        increment = unit if residual > 0 else -unit
        limit = len(parts) * self._policy.iterations_per_part

        result = list(parts)
        steps = 0
        while residual != 0:
            if steps >= limit:
                logger.error(
                    "residual_redistribution_limit_exceeded",
                    residual=str(residual),
                    total=str(total),
                    parts=len(parts),
                    scale=scale,
                )
                raise ResidualRedistributionError(residual, steps, scale)

            index = steps % len(result)
            result[index] = arithmetic.add(result[index], increment)
            residual = arithmetic.subtract(residual, increment)
            steps += 1

        logger.debug(
            "residual_redistributed",
            total=str(total),
            parts=len(parts),
            steps=steps,
        )

        return result

    def _check_part_count(self, parts: int) -> None:
        if parts < 1:
            raise InvalidDistributionError(f"parts must be at least 1, got {parts}")
        if parts > self._policy.max_parts:
            raise InvalidDistributionError(
                f"parts cannot exceed {self._policy.max_parts}, got {parts}"
            )

    def _check_total(self, total: Decimal, scale: int) -> None:
        # a residual finer than one minor unit can never be handed out
        if self._rounding.round(total, scale, RoundingMode.DOWN) != total:
            raise InvalidDistributionError(
                f"total {total} has more fractional digits than scale {scale}"
            )
