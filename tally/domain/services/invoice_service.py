from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Optional

from tally.domain import arithmetic
from tally.domain.exceptions import CurrencyMismatchError
from tally.domain.models import (
    IntegrityReport,
    InvoiceAggregation,
    LedgerEntry,
    LineItemResult,
)
from tally.shared.logging import get_logger

from .currency_registry import CurrencyCode
from .rounding_service import RoundingService

logger = get_logger(__name__)


class InvoiceService:
    """
    Invoice totals and their integrity check.

    Columns (taxable, tax, adjustment) are summed separately; the grand total
    is always the sum of the displayed line totals, so it never drifts from
    what the customer sees on the lines.
    """

    def __init__(self, rounding_service: RoundingService):
        self._rounding = rounding_service

    def aggregate(
        self, items: Sequence[LineItemResult], currency: CurrencyCode = None
    ) -> InvoiceAggregation:
        """
        Aggregate calculated lines into invoice totals.

        :param items: Calculated line items, all in one currency
        :param currency: Invoice currency (default: currency of the first item,
            or the default currency for an empty invoice)

        :return: Invoice aggregation whose grand total equals the sum of line totals

        :raises CurrencyMismatchError: if a line is in a different currency
        """
        if currency is None and items:
            code = items[0].currency
        else:
            code = self._rounding.registry.resolve_code(currency)

        for item in items:
            if self._rounding.registry.resolve_code(item.currency) != code:
                raise CurrencyMismatchError(code, item.currency, "aggregate")

        if not items:
            zero = self._round(0, code)
            return InvoiceAggregation(
                total_taxable=zero,
                total_tax=zero,
                total_before_adjustment=zero,
                total_adjustment=zero,
                grand_total=zero,
                items=(),
                currency=code,
            )

        total_taxable = self._round(
            arithmetic.total(item.calculated.taxable_amount for item in items), code
        )
        total_tax = self._round(
            arithmetic.total(item.calculated.tax_amount for item in items), code
        )
        total_before_adjustment = self._round(
            arithmetic.add(total_taxable, total_tax), code
        )
        total_adjustment = arithmetic.total(item.rounding_adjustment for item in items)

        column_grand_total = self._round(
            arithmetic.add(total_before_adjustment, total_adjustment), code
        )
        sum_of_line_totals = self._round(
            arithmetic.total(item.calculated.total for item in items), code
        )

        if column_grand_total != sum_of_line_totals:
            drift = arithmetic.subtract(sum_of_line_totals, column_grand_total)
            logger.info(
                "invoice_column_drift_absorbed",
                currency=code,
                column_grand_total=str(column_grand_total),
                sum_of_line_totals=str(sum_of_line_totals),
                drift=str(drift),
            )
            total_adjustment = arithmetic.add(total_adjustment, drift)

        aggregation = InvoiceAggregation(
            total_taxable=total_taxable,
            total_tax=total_tax,
            total_before_adjustment=total_before_adjustment,
            total_adjustment=self._round(total_adjustment, code),
            grand_total=sum_of_line_totals,
            items=tuple(items),
            currency=code,
        )

        logger.debug(
            "invoice_aggregated",
            currency=code,
            item_count=aggregation.item_count,
            grand_total=str(aggregation.grand_total),
        )

        return aggregation

    def verify_integrity(self, aggregation: InvoiceAggregation) -> IntegrityReport:
        """
        Re-check the arithmetic of an aggregation.

        Every line must satisfy ``total == round(taxable + tax + adjustment)``
        and the grand total must equal the sum of line totals.

        :return: Report with one message per failed check
        """
        code = aggregation.currency
        errors = []

        for number, item in enumerate(aggregation.items, start=1):
            amounts = item.calculated
            expected_total = self._round(
                arithmetic.total(
                    (amounts.taxable_amount, amounts.tax_amount, item.rounding_adjustment)
                ),
                code,
            )

            if amounts.total != expected_total:
                errors.append(
                    f"Line item {number}: total ({amounts.total}) != "
                    f"taxable + tax + adjustment ({expected_total})"
                )

        expected_grand_total = self._round(
            arithmetic.total(item.calculated.total for item in aggregation.items), code
        )

        if aggregation.grand_total != expected_grand_total:
            errors.append(
                f"Grand total ({aggregation.grand_total}) != "
                f"sum of line totals ({expected_grand_total})"
            )

        if errors:
            logger.warning("invoice_integrity_failed", currency=code, errors=errors)

        return IntegrityReport(
            errors=tuple(errors),
            expected_grand_total=expected_grand_total,
            actual_grand_total=aggregation.grand_total,
            difference=arithmetic.subtract(aggregation.grand_total, expected_grand_total),
        )

    def resolve_currency(self, currency: CurrencyCode) -> str:
        return self._rounding.registry.resolve_code(currency)

    def ledger_total(
        self, entries: Optional[Iterable[LedgerEntry]], currency: CurrencyCode = None
    ) -> Decimal:
        """Signed sum of active entries: credits count positive, debits negative."""
        contributions = [
            entry.signed_amount for entry in entries or () if entry.is_active
        ]

        return self._round(arithmetic.total(contributions), currency)

    def _round(self, value, currency: CurrencyCode) -> Decimal:
        return self._rounding.round_for_currency(value, currency)
