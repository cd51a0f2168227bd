from .invoice import IntegrityReport, Invoice, InvoiceAggregation, LedgerEntry
from .line_item import (
    EnteredTotalLineItemResult,
    LineItemAmounts,
    LineItemInput,
    LineItemResult,
    SanitizedLineItem,
    ValidatedLineItemInput,
)
from .tax import (
    CommissionBreakdown,
    DiscountBreakdown,
    GSTBreakdown,
    RoundOff,
    RoundOffDirection,
    TaxBreakdown,
    TaxInclusiveBreakdown,
    TaxSplit,
)

__all__ = [
    "LineItemInput",
    "ValidatedLineItemInput",
    "SanitizedLineItem",
    "LineItemAmounts",
    "LineItemResult",
    "EnteredTotalLineItemResult",
    "InvoiceAggregation",
    "IntegrityReport",
    "Invoice",
    "LedgerEntry",
    "TaxBreakdown",
    "GSTBreakdown",
    "TaxSplit",
    "TaxInclusiveBreakdown",
    "DiscountBreakdown",
    "CommissionBreakdown",
    "RoundOff",
    "RoundOffDirection",
]
