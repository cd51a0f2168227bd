from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Optional, Union

from tally.domain import arithmetic
from tally.domain.arithmetic import HUNDRED, DecimalLike
from tally.domain.models import (
    EnteredTotalLineItemResult,
    LineItemAmounts,
    LineItemInput,
    LineItemResult,
    SanitizedLineItem,
    ValidatedLineItemInput,
)
from tally.shared.logging import get_logger

from .currency_registry import CurrencyCode
from .rounding_service import RoundingService

logger = get_logger(__name__)


@dataclass(frozen=True)
class LineItemPolicy:
    # fractional digits kept for a back-solved unit price before display rounding
    unit_price_precision: int = 10
    division_precision: int = arithmetic.DEFAULT_DIVISION_PRECISION
    # largest integer every client can hold exactly in a double
    max_quantity: int = 2**53 - 1

    def __post_init__(self):
        if self.unit_price_precision > self.division_precision:
            raise ValueError(
                "Unit price precision cannot exceed division precision: "
                f"{self.unit_price_precision} > {self.division_precision}"
            )
        if self.unit_price_precision < 0:
            raise ValueError(
                f"Unit price precision cannot be negative: {self.unit_price_precision}"
            )
        if self.max_quantity < 1:
            raise ValueError(f"Max quantity must be at least 1: {self.max_quantity}")


@dataclass(frozen=True)
class _Clamped:
    quantity: int
    discount_amount: Decimal
    tax_rate: Decimal
    errors: tuple[str, ...]


class LineItemService:
    """
    Invoice line calculation in two modes.

    Derived mode computes a line forward from its unit price, rounding at
    every step. Entered-total mode back-solves the unit price from a total
    typed in by the user and books whatever the displayed price cannot
    reproduce as a rounding adjustment.
    """

    def __init__(
        self,
        rounding_service: RoundingService,
        policy: Optional[LineItemPolicy] = None,
    ):
        self._rounding = rounding_service
        self._policy = policy or LineItemPolicy()

    def validate(self, item: LineItemInput) -> ValidatedLineItemInput:
        """
        Clamp line inputs into their valid ranges.

        Invalid values are never rejected: each is replaced by the nearest
        valid one and a message is recorded.

        :param item: Raw line input

        :return: Clamped values, default currency filled in, and the list of messages

        :raises InvalidAmountError: if a field cannot be read as a decimal
        """
        unit_price = arithmetic.to_decimal(item.unit_price)
        errors = []

        if unit_price < 0:
            errors.append("Unit price cannot be negative")
            unit_price = Decimal(0)

        clamped = self._clamp(item.quantity, item.discount_amount, item.tax_rate)
        errors.extend(clamped.errors)

        validated = ValidatedLineItemInput(
            unit_price=unit_price,
            quantity=clamped.quantity,
            discount_amount=clamped.discount_amount,
            tax_rate=clamped.tax_rate,
            currency=self._rounding.registry.resolve_code(item.currency),
            errors=tuple(errors),
        )

        if not validated.is_valid:
            logger.warning(
                "line_item_input_clamped",
                errors=list(validated.errors),
                currency=validated.currency,
            )

        return validated

    def calculate(self, item: LineItemInput) -> LineItemResult:
        """
        Calculate a line forward from its unit price.

        Every intermediate value is rounded to the currency scale, so the
        line always satisfies ``total == taxable + tax``.

        :param item: Raw line input; clamped first

        :return: Line result with a zero rounding adjustment
        """
        validated = self.validate(item)
        currency = validated.currency
        config = self._rounding.registry.get(currency)

        gross_amount = self._round(
            arithmetic.multiply(validated.unit_price, validated.quantity), currency
        )
        effective_discount = min(validated.discount_amount, gross_amount)
        taxable_amount = self._round(
            arithmetic.subtract(gross_amount, effective_discount), currency
        )
        tax_amount = self._round(
            arithmetic.percentage(taxable_amount, validated.tax_rate), currency
        )
        total = self._round(arithmetic.add(taxable_amount, tax_amount), currency)

        logger.debug(
            "line_item_calculated",
            mode="derived",
            currency=currency,
            total=str(total),
        )

        return LineItemResult(
            input=SanitizedLineItem(
                unit_price=validated.unit_price,
                quantity=validated.quantity,
                discount_amount=effective_discount,
                tax_rate=validated.tax_rate,
            ),
            calculated=LineItemAmounts(
                gross_amount=gross_amount,
                taxable_amount=taxable_amount,
                tax_amount=tax_amount,
                total=total,
            ),
            rounding_adjustment=Decimal(0).quantize(Decimal(1).scaleb(-config.scale)),
            currency=currency,
            scale=config.scale,
            validation_errors=validated.errors,
        )

    def calculate_from_total(
        self,
        total: DecimalLike,
        quantity: Union[int, DecimalLike],
        tax_rate: DecimalLike,
        discount_amount: DecimalLike = 0,
        currency: CurrencyCode = None,
    ) -> EnteredTotalLineItemResult:
        """
        Back-solve a line from an entered total.

        The taxable amount is ``total / (1 + rate / 100)``, the unit price is
        ``(taxable + discount) / quantity``; the line is then recomputed from
        the displayed (rounded) unit price. The entered total is kept, and
        ``entered - recomputed`` becomes the rounding adjustment.

        :param total: Total entered by the user, tax included; clamped to be non-negative
        :param quantity: Quantity, clamped to [1, ``max_quantity``]
        :param tax_rate: Tax rate in percent, clamped to [0, 100]
        :param discount_amount: Flat discount, clamped to be non-negative
        :param currency: Currency code (default currency if omitted)

        :return: Line result carrying the exact and displayed unit price
        """
        currency = self._rounding.registry.resolve_code(currency)
        config = self._rounding.registry.get(currency)

        errors = []
        entered_total = self._round(total, currency)
        if entered_total < 0:
            errors.append("Total cannot be negative")
            entered_total = self._round(0, currency)

        clamped = self._clamp(quantity, discount_amount, tax_rate)
        errors.extend(clamped.errors)

        tax_multiplier = arithmetic.add(1, arithmetic.percentage(1, clamped.tax_rate))
        taxable_amount = self._round(
            arithmetic.divide(
                entered_total,
                tax_multiplier,
                self._policy.division_precision,
            ),
            currency,
        )
        gross_amount = self._round(
            arithmetic.add(taxable_amount, clamped.discount_amount), currency
        )

        exact_unit_price = arithmetic.divide(
            gross_amount, clamped.quantity, self._policy.unit_price_precision
        )
        displayed_unit_price = self._round(exact_unit_price, currency)

        recomputed = self.calculate(
            LineItemInput(
                unit_price=displayed_unit_price,
                quantity=clamped.quantity,
                tax_rate=clamped.tax_rate,
                discount_amount=clamped.discount_amount,
                currency=currency,
            )
        )
        recomputed_total = recomputed.calculated.total
        for error in recomputed.validation_errors:
            if error not in errors:
                errors.append(error)

        if errors:
            logger.warning(
                "line_item_input_clamped",
                errors=errors,
                currency=currency,
            )

        adjustment = arithmetic.subtract(entered_total, recomputed_total)

        if adjustment != 0:
            logger.info(
                "line_item_rounding_adjustment",
                currency=currency,
                entered_total=str(entered_total),
                recomputed_total=str(recomputed_total),
                adjustment=str(adjustment),
            )

        return EnteredTotalLineItemResult(
            input=recomputed.input,
            calculated=LineItemAmounts(
                gross_amount=recomputed.calculated.gross_amount,
                taxable_amount=recomputed.calculated.taxable_amount,
                tax_amount=recomputed.calculated.tax_amount,
                total=entered_total,
            ),
            rounding_adjustment=adjustment,
            currency=currency,
            scale=config.scale,
            validation_errors=tuple(errors),
            exact_unit_price=exact_unit_price,
            displayed_unit_price=displayed_unit_price,
            recomputed_total=recomputed_total,
        )

    def _clamp(
        self,
        quantity: Union[int, DecimalLike],
        discount_amount: DecimalLike,
        tax_rate: DecimalLike,
    ) -> _Clamped:
        errors = []

        raw_quantity = arithmetic.to_decimal(quantity)
        max_quantity = self._policy.max_quantity
        if raw_quantity < 1:
            errors.append("Quantity must be at least 1")
        if raw_quantity > max_quantity:
            errors.append(f"Quantity cannot exceed {max_quantity}")
            raw_quantity = Decimal(max_quantity)
        clamped_quantity = max(1, int(raw_quantity.to_integral_value(rounding=ROUND_FLOOR)))

        discount = arithmetic.to_decimal(discount_amount)
        if discount < 0:
            errors.append("Discount cannot be negative")
            discount = Decimal(0)

        rate = arithmetic.to_decimal(tax_rate)
        if rate < 0:
            errors.append("Tax rate cannot be negative")
        if rate > HUNDRED:
            errors.append("Tax rate cannot exceed 100%")
        rate = arithmetic.clamp(rate, 0, HUNDRED)

        return _Clamped(
            quantity=clamped_quantity,
            discount_amount=discount,
            tax_rate=rate,
            errors=tuple(errors),
        )

    def _round(self, value: DecimalLike, currency: str) -> Decimal:
        return self._rounding.round_for_currency(value, currency)
