from .container import get_container_dependency
from .services import (
    get_calculate_invoice_query_handler,
    get_currency_registry,
    get_distribution_service,
    get_line_item_service,
    get_rounding_service,
    get_tax_service,
)

__all__ = [
    "get_container_dependency",
    "get_currency_registry",
    "get_rounding_service",
    "get_distribution_service",
    "get_line_item_service",
    "get_tax_service",
    "get_calculate_invoice_query_handler",
]
