from .currency_registry import CURRENCY_TABLE, CurrencyRegistry
from .distribution_service import DistributionPolicy, DistributionService
from .interest_service import InterestPolicy, InterestService
from .invoice_service import InvoiceService
from .line_item_service import LineItemPolicy, LineItemService
from .rounding_service import RoundingPolicy, RoundingService, round_decimal
from .tax_service import TaxPolicy, TaxService

__all__ = [
    "CURRENCY_TABLE",
    "CurrencyRegistry",
    "RoundingPolicy",
    "RoundingService",
    "round_decimal",
    "DistributionPolicy",
    "DistributionService",
    "LineItemPolicy",
    "LineItemService",
    "TaxPolicy",
    "TaxService",
    "InvoiceService",
    "InterestPolicy",
    "InterestService",
]
