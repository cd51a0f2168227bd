from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class TaxBreakdown:
    tax_amount: Decimal
    total_with_tax: Decimal


@dataclass(frozen=True)
class GSTBreakdown:
    gst_amount: Decimal
    cgst: Decimal
    sgst: Decimal
    total_with_gst: Decimal


@dataclass(frozen=True)
class TaxSplit:
    """Central/state halves of a tax amount; ``cgst + sgst`` equals the tax exactly."""

    cgst: Decimal
    sgst: Decimal


@dataclass(frozen=True)
class TaxInclusiveBreakdown:
    base_amount: Decimal
    tax_amount: Decimal


@dataclass(frozen=True)
class DiscountBreakdown:
    discount_amount: Decimal
    final_amount: Decimal
    effective_discount_percent: Decimal


@dataclass(frozen=True)
class CommissionBreakdown:
    commission: Decimal
    gst_on_commission: Decimal
    tds: Decimal
    net_commission: Decimal
    net_to_property: Decimal


class RoundOffDirection(str, Enum):
    NEAREST = "NEAREST"
    UP = "UP"
    DOWN = "DOWN"


@dataclass(frozen=True)
class RoundOff:
    rounded_amount: Decimal
    round_off_amount: Decimal
