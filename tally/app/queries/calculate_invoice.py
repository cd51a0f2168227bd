from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Union

from tally.domain.arithmetic import DecimalLike
from tally.domain.models import Invoice, LineItemInput, LineItemResult
from tally.domain.services import InvoiceService, LineItemService
from tally.shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DerivedLine:
    """A line priced forward from its unit price."""

    item: LineItemInput


@dataclass(frozen=True)
class EnteredTotalLine:
    """A line whose tax-inclusive total was typed in by the user."""

    total: DecimalLike
    quantity: Union[int, DecimalLike]
    tax_rate: DecimalLike
    discount_amount: DecimalLike = Decimal(0)


InvoiceLine = Union[DerivedLine, EnteredTotalLine]


@dataclass(frozen=True)
class CalculateInvoiceQuery:
    lines: tuple[InvoiceLine, ...]
    currency: Optional[str] = None


class CalculateInvoiceQueryHandler:
    def __init__(
        self,
        line_item_service: LineItemService,
        invoice_service: InvoiceService,
    ):
        self._line_items = line_item_service
        self._invoices = invoice_service

    async def handle(self, query: CalculateInvoiceQuery) -> Invoice:
        """
        Calculate every line of an invoice, aggregate them and check the result.

        Lines without a currency take the invoice currency. Clamped inputs do
        not fail the invoice; their messages are returned as warnings.

        :param query: Invoice lines and currency
        :return: Invoice with its aggregation, integrity report and warnings

        :raises CurrencyMismatchError: If a line names a different currency than the invoice
        """
        currency = self._invoices.resolve_currency(query.currency)

        items = [self._calculate(line, currency) for line in query.lines]
        aggregation = self._invoices.aggregate(items, currency)
        integrity = self._invoices.verify_integrity(aggregation)

        warnings = tuple(
            f"Line item {number}: {message}"
            for number, item in enumerate(items, start=1)
            for message in item.validation_errors
        )

        logger.info(
            "invoice_calculated",
            currency=currency,
            item_count=aggregation.item_count,
            grand_total=str(aggregation.grand_total),
            total_adjustment=str(aggregation.total_adjustment),
            is_valid=integrity.is_valid,
            warning_count=len(warnings),
        )

        return Invoice(aggregation=aggregation, integrity=integrity, warnings=warnings)

    def _calculate(self, line: InvoiceLine, currency: str) -> LineItemResult:
        if isinstance(line, EnteredTotalLine):
            return self._line_items.calculate_from_total(
                line.total,
                line.quantity,
                line.tax_rate,
                line.discount_amount,
                currency,
            )

        item = line.item
        if item.currency is None:
            item = replace(item, currency=currency)

        return self._line_items.calculate(item)
