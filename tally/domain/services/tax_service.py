from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from tally.domain import arithmetic
from tally.domain.arithmetic import DecimalLike
from tally.domain.models import (
    CommissionBreakdown,
    DiscountBreakdown,
    GSTBreakdown,
    RoundOff,
    RoundOffDirection,
    TaxBreakdown,
    TaxInclusiveBreakdown,
    TaxSplit,
)
from tally.domain.values import RoundingMode

from .currency_registry import CurrencyCode
from .rounding_service import RoundingService

_ROUND_OFF_MODES = {
    RoundOffDirection.NEAREST: RoundingMode.HALF_UP,
    RoundOffDirection.UP: RoundingMode.CEILING,
    RoundOffDirection.DOWN: RoundingMode.FLOOR,
}


@dataclass(frozen=True)
class TaxPolicy:
    tds_rate: Decimal = Decimal(10)
    gst_on_commission_rate: Decimal = Decimal(18)
    division_precision: int = arithmetic.DEFAULT_DIVISION_PRECISION


class TaxService:
    """
    Tax, discount and commission helpers.

    Every amount returned is rounded to the currency scale unless noted.
    """

    def __init__(
        self,
        rounding_service: RoundingService,
        policy: Optional[TaxPolicy] = None,
    ):
        self._rounding = rounding_service
        self._policy = policy or TaxPolicy()

    def split_tax_cgst_sgst(
        self, tax_amount: DecimalLike, currency: CurrencyCode = None
    ) -> TaxSplit:
        """
        Split a tax amount into central and state halves.

        CGST is the rounded half, SGST takes the exact remainder, so the two
        always add back to ``tax_amount``.
        """
        tax_amount = arithmetic.to_decimal(tax_amount)
        cgst = self._round(
            arithmetic.divide(tax_amount, 2, self._policy.division_precision),
            currency,
        )

        return TaxSplit(cgst=cgst, sgst=arithmetic.subtract(tax_amount, cgst))

    def calculate_gst(
        self, base_amount: DecimalLike, gst_rate: DecimalLike, currency: CurrencyCode = None
    ) -> GSTBreakdown:
        """
        GST at ``gst_rate`` as two halves, each rounded on its own.

        The two halves can differ from ``round(base * rate / 100)`` by one
        minor unit; ``gst_amount`` is always their sum.
        """
        half_rate = arithmetic.divide(gst_rate, 2, self._policy.division_precision)
        cgst = self._round(arithmetic.percentage(base_amount, half_rate), currency)
        sgst = self._round(arithmetic.percentage(base_amount, half_rate), currency)
        gst_amount = arithmetic.add(cgst, sgst)

        return GSTBreakdown(
            gst_amount=gst_amount,
            cgst=cgst,
            sgst=sgst,
            total_with_gst=self._round(arithmetic.add(base_amount, gst_amount), currency),
        )

    def calculate_tax(
        self, base_amount: DecimalLike, tax_rate: DecimalLike, currency: CurrencyCode = None
    ) -> TaxBreakdown:
        tax_amount = self._round(arithmetic.percentage(base_amount, tax_rate), currency)

        return TaxBreakdown(
            tax_amount=tax_amount,
            total_with_tax=self._round(arithmetic.add(base_amount, tax_amount), currency),
        )

    def base_from_tax_inclusive(
        self, total_amount: DecimalLike, tax_rate: DecimalLike, currency: CurrencyCode = None
    ) -> TaxInclusiveBreakdown:
        """
        Split a tax-inclusive total into base and tax.

        :return: ``base = round(total / (1 + rate / 100))`` and ``tax = total - base``
        """
        divisor = arithmetic.add(1, arithmetic.percentage(1, tax_rate))
        base_amount = self._round(
            arithmetic.divide(total_amount, divisor, self._policy.division_precision),
            currency,
        )

        return TaxInclusiveBreakdown(
            base_amount=base_amount,
            tax_amount=self._round(
                arithmetic.subtract(total_amount, base_amount), currency
            ),
        )

    def calculate_discount(
        self,
        original_amount: DecimalLike,
        discount_percent: Optional[DecimalLike] = None,
        discount_amount: Optional[DecimalLike] = None,
        currency: CurrencyCode = None,
    ) -> DiscountBreakdown:
        """
        Apply a percentage or a flat discount.

        A non-zero ``discount_percent`` wins over ``discount_amount``. The
        discount never exceeds the original amount.
        """
        original_amount = arithmetic.to_decimal(original_amount)

        if discount_percent is not None and arithmetic.to_decimal(discount_percent) != 0:
            discount = arithmetic.percentage(original_amount, discount_percent)
        elif discount_amount is not None:
            discount = arithmetic.to_decimal(discount_amount)
        else:
            discount = Decimal(0)

        discount = min(self._round(discount, currency), original_amount)

        if original_amount == 0:
            effective_percent = Decimal(0)
        else:
            effective_percent = self._rounding.round(
                arithmetic.percentage_of(
                    discount, original_amount, self._policy.division_precision
                ),
                2,
            )

        return DiscountBreakdown(
            discount_amount=discount,
            final_amount=self._round(
                arithmetic.subtract(original_amount, discount), currency
            ),
            effective_discount_percent=effective_percent,
        )

    def calculate_commission(
        self,
        gross_amount: DecimalLike,
        commission_rate: DecimalLike,
        tds_rate: Optional[DecimalLike] = None,
        gst_rate: Optional[DecimalLike] = None,
        currency: CurrencyCode = None,
    ) -> CommissionBreakdown:
        """
        Commission with GST charged on it and TDS withheld from it.

        ``net_commission = commission + gst - tds`` is what the agent keeps;
        ``net_to_property = gross - commission - gst + tds`` is what the
        property receives.
        """
        tds_rate = self._policy.tds_rate if tds_rate is None else tds_rate
        gst_rate = self._policy.gst_on_commission_rate if gst_rate is None else gst_rate

        commission = self._round(
            arithmetic.percentage(gross_amount, commission_rate), currency
        )
        gst_on_commission = self._round(
            arithmetic.percentage(commission, gst_rate), currency
        )
        tds = self._round(arithmetic.percentage(commission, tds_rate), currency)
        charged = arithmetic.add(commission, gst_on_commission)

        return CommissionBreakdown(
            commission=commission,
            gst_on_commission=gst_on_commission,
            tds=tds,
            net_commission=self._round(arithmetic.subtract(charged, tds), currency),
            net_to_property=self._round(
                arithmetic.add(arithmetic.subtract(gross_amount, charged), tds),
                currency,
            ),
        )

    def add_percentage(
        self, base_amount: DecimalLike, rate: DecimalLike, currency: CurrencyCode = None
    ) -> Decimal:
        """``round(base + base * rate / 100)``"""
        return self._round(
            arithmetic.add(base_amount, arithmetic.percentage(base_amount, rate)), currency
        )

    def subtract_percentage(
        self, base_amount: DecimalLike, rate: DecimalLike, currency: CurrencyCode = None
    ) -> Decimal:
        """``round(base - base * rate / 100)``"""
        return self._round(
            arithmetic.subtract(base_amount, arithmetic.percentage(base_amount, rate)),
            currency,
        )

    def apply_price_multiplier(
        self, price: DecimalLike, multiplier: DecimalLike, currency: CurrencyCode = None
    ) -> Decimal:
        return self._round(arithmetic.multiply(price, multiplier), currency)

    def percentage_of_total(self, part: DecimalLike, total: DecimalLike) -> Decimal:
        """
        What percent ``part`` is of ``total``, unrounded.

        A zero total yields zero instead of a division error.
        """
        if arithmetic.to_decimal(total) == 0:
            return Decimal(0)

        return arithmetic.percentage_of(part, total, self._policy.division_precision)

    def resolve_discount(
        self,
        total_amount: DecimalLike,
        discount_percent: Optional[DecimalLike] = None,
        discount_amount: Optional[DecimalLike] = None,
        currency: CurrencyCode = None,
    ) -> Decimal:
        """
        Discount amount for a total from a percentage or a flat value.

        A positive ``discount_percent`` wins; otherwise a positive
        ``discount_amount`` is used; anything else means no discount.
        Unlike :meth:`calculate_discount` the result is not capped at the total.
        """
        if discount_percent is not None and arithmetic.to_decimal(discount_percent) > 0:
            discount = arithmetic.percentage(total_amount, discount_percent)
        elif discount_amount is not None and arithmetic.to_decimal(discount_amount) > 0:
            discount = discount_amount
        else:
            discount = 0

        return self._round(discount, currency)

    def round_off(
        self,
        amount: DecimalLike,
        direction: Union[RoundOffDirection, str] = RoundOffDirection.NEAREST,
    ) -> RoundOff:
        """
        Round an invoice total to whole units and report the round-off line.

        :return: Rounded amount and ``rounded - amount``
        """
        amount = arithmetic.to_decimal(amount)
        if not isinstance(direction, RoundOffDirection):
            direction = RoundOffDirection(direction.strip().upper())

        mode = _ROUND_OFF_MODES[direction]
        rounded = self._rounding.round(amount, 0, mode)

        return RoundOff(
            rounded_amount=rounded,
            round_off_amount=arithmetic.subtract(rounded, amount),
        )

    def _round(self, value: DecimalLike, currency: CurrencyCode) -> Decimal:
        return self._rounding.round_for_currency(value, currency)
