from dataclasses import dataclass, field
from decimal import Decimal

from .line_item import LineItemResult


@dataclass(frozen=True)
class InvoiceAggregation:
    """
    Invoice totals built from calculated lines.

    ``grand_total`` is always the sum of the displayed line totals; any
    difference with the column sums lives in ``total_adjustment``.
    """

    total_taxable: Decimal
    total_tax: Decimal
    total_before_adjustment: Decimal
    total_adjustment: Decimal
    grand_total: Decimal
    items: tuple[LineItemResult, ...]
    currency: str

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def has_adjustments(self) -> bool:
        return self.total_adjustment != 0


@dataclass(frozen=True)
class IntegrityReport:
    errors: tuple[str, ...]
    expected_grand_total: Decimal
    actual_grand_total: Decimal
    difference: Decimal

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class LedgerEntry:
    amount: Decimal
    entry_type: str = "DEBIT"
    is_active: bool = True

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.entry_type.upper() == "CREDIT" else -self.amount


@dataclass(frozen=True)
class Invoice:
    """An aggregated invoice together with its integrity check."""

    aggregation: InvoiceAggregation
    integrity: IntegrityReport
    warnings: tuple[str, ...] = field(default=())
