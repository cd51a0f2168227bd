from fastapi import Depends

from tally.app.queries import CalculateInvoiceQueryHandler
from tally.domain.services import (
    CurrencyRegistry,
    DistributionService,
    LineItemService,
    RoundingService,
    TaxService,
)
from tally.shared.di import Container

from .container import get_container_dependency


def get_currency_registry(
    container: Container = Depends(get_container_dependency),
) -> CurrencyRegistry:
    return container.currency_registry()


def get_rounding_service(
    container: Container = Depends(get_container_dependency),
) -> RoundingService:
    return container.rounding_service()


def get_distribution_service(
    container: Container = Depends(get_container_dependency),
) -> DistributionService:
    return container.distribution_service()


def get_line_item_service(
    container: Container = Depends(get_container_dependency),
) -> LineItemService:
    return container.line_item_service()


def get_tax_service(
    container: Container = Depends(get_container_dependency),
) -> TaxService:
    return container.tax_service()


def get_calculate_invoice_query_handler(
    container: Container = Depends(get_container_dependency),
) -> CalculateInvoiceQueryHandler:
    return container.calculate_invoice_query_handler()
