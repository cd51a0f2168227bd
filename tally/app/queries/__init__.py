from .calculate_invoice import (
    CalculateInvoiceQuery,
    CalculateInvoiceQueryHandler,
    DerivedLine,
    EnteredTotalLine,
    InvoiceLine,
)

__all__ = [
    "CalculateInvoiceQuery",
    "CalculateInvoiceQueryHandler",
    "DerivedLine",
    "EnteredTotalLine",
    "InvoiceLine",
]
