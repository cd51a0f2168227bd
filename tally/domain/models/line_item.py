from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Union

from tally.domain.arithmetic import DecimalLike


@dataclass(frozen=True)
class LineItemInput:
    """Raw, user-supplied line item. Validated and clamped before any calculation."""

    unit_price: DecimalLike
    quantity: Union[int, DecimalLike]
    tax_rate: DecimalLike
    discount_amount: DecimalLike = 0
    currency: Optional[str] = None


@dataclass(frozen=True)
class ValidatedLineItemInput:
    unit_price: Decimal
    quantity: int
    discount_amount: Decimal
    tax_rate: Decimal
    currency: str
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class SanitizedLineItem:
    """The inputs actually used by a calculation (discount is the effective one)."""

    unit_price: Decimal
    quantity: int
    discount_amount: Decimal
    tax_rate: Decimal


@dataclass(frozen=True)
class LineItemAmounts:
    gross_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    total: Decimal


@dataclass(frozen=True)
class LineItemResult:
    """
    A calculated invoice line.

    Invariant: ``calculated.total == taxable_amount + tax_amount + rounding_adjustment``
    at currency scale.
    """

    input: SanitizedLineItem
    calculated: LineItemAmounts
    rounding_adjustment: Decimal
    currency: str
    scale: int
    validation_errors: tuple[str, ...] = field(default=())

    @property
    def has_adjustment(self) -> bool:
        return self.rounding_adjustment != 0


@dataclass(frozen=True)
class EnteredTotalLineItemResult(LineItemResult):
    """A line back-solved from an entered total."""

    exact_unit_price: Decimal = Decimal(0)
    displayed_unit_price: Decimal = Decimal(0)
    recomputed_total: Decimal = Decimal(0)
