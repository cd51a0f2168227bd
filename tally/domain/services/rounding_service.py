from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from typing import Optional, Union

from tally.domain import arithmetic
from tally.domain.arithmetic import DecimalLike
from tally.domain.values import (
    DEFAULT_ROUNDING_MODE,
    DEFAULT_SCALE,
    Money,
    RoundingAdjustment,
    RoundingMode,
    TotalAdjustment,
)

from .currency_registry import CurrencyCode, CurrencyRegistry

ModeLike = Union[RoundingMode, str, None]

_HALF = Decimal("0.5")


@dataclass(frozen=True)
class RoundingPolicy:
    """Scale and mode used when a caller does not specify them."""

    scale: int = DEFAULT_SCALE
    mode: RoundingMode = DEFAULT_ROUNDING_MODE

    def __post_init__(self):
        if self.scale < 0:
            raise ValueError(f"Scale cannot be negative: {self.scale}")

        object.__setattr__(self, "mode", RoundingMode.parse(self.mode))


def round_decimal(
    value: DecimalLike, scale: int, mode: Union[RoundingMode, str]
) -> Decimal:
    """
    Round ``value`` to ``scale`` fractional digits.

    The value is split into its integer part at the target scale and the
    remaining fraction; the fraction and the sign decide whether the integer
    part moves one unit away from zero.

    :return: Decimal with exactly ``scale`` fractional digits
    """
    if scale < 0:
        raise ValueError(f"Scale cannot be negative: {scale}")

    mode = RoundingMode.parse(mode)
    value = arithmetic.to_decimal(value)
    quantum = Decimal(1).scaleb(-scale)

    with arithmetic.exact():
        shifted = value.scaleb(scale)
        truncated = shifted.to_integral_value(rounding=ROUND_DOWN)
        remainder = abs(shifted - truncated)

        if remainder != 0 and _rounds_away(mode, value > 0, remainder, truncated):
            truncated += 1 if value > 0 else -1

        result = truncated.scaleb(-scale).quantize(quantum)

    if result == 0:
        return result.copy_abs()

    return result


def _rounds_away(
    mode: RoundingMode, positive: bool, remainder: Decimal, truncated: Decimal
) -> bool:
    if mode is RoundingMode.UP:
        return True
    if mode is RoundingMode.DOWN:
        return False
    if mode is RoundingMode.CEILING:
        return positive
    if mode is RoundingMode.FLOOR:
        return not positive

    if remainder != _HALF:
        return remainder > _HALF

    # exact tie
    if mode is RoundingMode.HALF_UP:
        return True
    if mode is RoundingMode.HALF_DOWN:
        return False
    if mode is RoundingMode.HALF_EVEN:
        return truncated % 2 != 0
    if mode is RoundingMode.HALF_CEILING:
        return positive
    if mode is RoundingMode.HALF_FLOOR:
        return not positive

    raise ValueError(f"Unknown rounding mode: {mode}")


class RoundingService:
    """
    Currency-aware rounding with adjustment tracking.
    """

    def __init__(
        self,
        registry: Optional[CurrencyRegistry] = None,
        policy: Optional[RoundingPolicy] = None,
    ):
        self._registry = registry or CurrencyRegistry()
        self._policy = policy or RoundingPolicy(
            scale=self._registry.default_scale,
            mode=self._registry.default_rounding_mode,
        )

    @property
    def registry(self) -> CurrencyRegistry:
        return self._registry

    @property
    def policy(self) -> RoundingPolicy:
        return self._policy

    def round(
        self,
        value: DecimalLike,
        scale: Optional[int] = None,
        mode: ModeLike = None,
    ) -> Decimal:
        """
        Round a value to a fixed scale.

        :param value: Value to round
        :param scale: Fractional digits to keep (default: policy scale)
        :param mode: Rounding mode (default: policy mode)

        :return: Rounded value with exactly ``scale`` fractional digits
        """
        return round_decimal(value, self._scale(scale), self._mode(mode))

    def round_with_adjustment(
        self,
        value: DecimalLike,
        scale: Optional[int] = None,
        mode: ModeLike = None,
    ) -> RoundingAdjustment:
        """
        Round a value and keep the signed delta ``rounded - original`` for audit.
        """
        scale = self._scale(scale)
        mode = self._mode(mode)

        original = arithmetic.to_decimal(value)
        rounded = round_decimal(original, scale, mode)

        return RoundingAdjustment(
            original=original,
            rounded=rounded,
            adjustment=arithmetic.subtract(rounded, original),
            scale=scale,
            mode=mode,
        )

    def round_for_currency(
        self, value: DecimalLike, currency: CurrencyCode, mode: ModeLike = None
    ) -> Decimal:
        config = self._registry.get(currency)

        return round_decimal(
            value, config.scale, RoundingMode.parse(mode or config.rounding_mode)
        )

    def round_for_currency_with_adjustment(
        self, value: DecimalLike, currency: CurrencyCode, mode: ModeLike = None
    ) -> RoundingAdjustment:
        config = self._registry.get(currency)

        return self.round_with_adjustment(
            value, config.scale, mode or config.rounding_mode
        )

    def round_money(
        self, money: Money, scale: Optional[int] = None, mode: ModeLike = None
    ) -> Money:
        return Money(self.round(money.amount, scale, mode), money.currency)

    def round_money_to_currency(self, money: Money, mode: ModeLike = None) -> Money:
        return Money(
            self.round_for_currency(money.amount, money.currency, mode),
            money.currency,
        )

    def round_money_with_adjustment(
        self, money: Money, mode: ModeLike = None
    ) -> tuple[Money, RoundingAdjustment]:
        adjustment = self.round_for_currency_with_adjustment(
            money.amount, money.currency, mode
        )

        return Money(adjustment.rounded, money.currency), adjustment

    def total_adjustment(
        self,
        values: list[DecimalLike],
        scale: Optional[int] = None,
        mode: ModeLike = None,
    ) -> TotalAdjustment:
        """
        Compare rounding each value with rounding their sum.

        ``adjustment_from_rounding_sum`` is ``round(sum) - sum(round)``: the
        amount that would have to be booked so the rounded items foot to the
        rounded total.
        """
        scale = self._scale(scale)
        mode = self._mode(mode)

        per_item = tuple(self.round_with_adjustment(v, scale, mode) for v in values)

        original_total = arithmetic.total(values)
        rounded_items_total = arithmetic.total(a.rounded for a in per_item)
        rounded_total = round_decimal(original_total, scale, mode)

        return TotalAdjustment(
            original_total=original_total,
            rounded_total=rounded_total,
            per_item_adjustments=per_item,
            total_adjustment=arithmetic.subtract(rounded_total, original_total),
            adjustment_from_rounding_sum=arithmetic.subtract(
                rounded_total, rounded_items_total
            ),
        )

    def to_smallest_unit(self, amount: DecimalLike, scale: Optional[int] = None) -> Decimal:
        """Amount in minor units (rupees to paise), rounded to a whole unit."""
        scale = self._scale(scale)
        shifted = arithmetic.multiply(amount, Decimal(1).scaleb(scale))

        return self.round(shifted, 0)

    def from_smallest_unit(self, units: DecimalLike, scale: Optional[int] = None) -> Decimal:
        """Amount in major units (paise to rupees). Exact."""
        scale = self._scale(scale)

        with arithmetic.exact():
            return arithmetic.to_decimal(units).scaleb(-scale)

    def _scale(self, scale: Optional[int]) -> int:
        scale = self._policy.scale if scale is None else scale

        if scale < 0:
            raise ValueError(f"Scale cannot be negative: {scale}")

        return scale

    def _mode(self, mode: ModeLike) -> RoundingMode:
        return self._policy.mode if mode is None else RoundingMode.parse(mode)
