from dependency_injector import containers, providers

from tally.app.queries import CalculateInvoiceQueryHandler
from tally.domain.services import (
    CurrencyRegistry,
    DistributionPolicy,
    DistributionService,
    InterestPolicy,
    InterestService,
    InvoiceService,
    LineItemPolicy,
    LineItemService,
    RoundingPolicy,
    RoundingService,
    TaxPolicy,
    TaxService,
)
from tally.domain.services.factory import MoneyFactory
from tally.shared.config import get_settings
from tally.shared.logging import get_logger

logger = get_logger(__name__)


class Container(containers.DeclarativeContainer):
    config = providers.Configuration()

    currency_registry = providers.Singleton(
        CurrencyRegistry,
        default_currency=config.default_currency,
        default_scale=config.default_scale,
        default_rounding_mode=config.default_rounding_mode,
    )

    rounding_policy = providers.Singleton(
        RoundingPolicy,
        scale=config.default_scale,
        mode=config.default_rounding_mode,
    )

    rounding_service = providers.Singleton(
        RoundingService,
        registry=currency_registry,
        policy=rounding_policy,
    )

    money_factory = providers.Singleton(
        MoneyFactory,
        rounding_service=rounding_service,
    )

    distribution_policy = providers.Singleton(
        DistributionPolicy,
        max_parts=config.max_distribution_parts,
        division_precision=config.division_precision,
    )

    distribution_service = providers.Singleton(
        DistributionService,
        rounding_service=rounding_service,
        policy=distribution_policy,
    )

    line_item_policy = providers.Singleton(
        LineItemPolicy,
        unit_price_precision=config.unit_price_precision,
        division_precision=config.division_precision,
    )

    line_item_service = providers.Singleton(
        LineItemService,
        rounding_service=rounding_service,
        policy=line_item_policy,
    )

    tax_policy = providers.Singleton(
        TaxPolicy,
        division_precision=config.division_precision,
    )

    tax_service = providers.Singleton(
        TaxService,
        rounding_service=rounding_service,
        policy=tax_policy,
    )

    invoice_service = providers.Singleton(
        InvoiceService,
        rounding_service=rounding_service,
    )

    interest_policy = providers.Singleton(
        InterestPolicy,
        division_precision=config.division_precision,
    )

    interest_service = providers.Singleton(
        InterestService,
        policy=interest_policy,
    )

    calculate_invoice_query_handler = providers.Factory(
        CalculateInvoiceQueryHandler,
        line_item_service=line_item_service,
        invoice_service=invoice_service,
    )


async def cleanup_resources(container: Container) -> None:
    logger.info("container_cleanup_starting")

    container.shutdown_resources()
    container.reset_singletons()

    logger.info("container_cleanup_complete")


def get_container(app_type: str = "api") -> Container:
    settings = get_settings()

    container = Container()

    container.config.from_dict(
        {
            "default_currency": settings.DEFAULT_CURRENCY,
            "default_scale": settings.DEFAULT_SCALE,
            "default_rounding_mode": settings.DEFAULT_ROUNDING_MODE,
            "division_precision": settings.DIVISION_PRECISION,
            "unit_price_precision": settings.UNIT_PRICE_PRECISION,
            "max_distribution_parts": settings.MAX_DISTRIBUTION_PARTS,
        }
    )

    logger.info(
        "di_container_configured",
        app_type=app_type,
        default_currency=settings.DEFAULT_CURRENCY,
        default_rounding_mode=settings.DEFAULT_ROUNDING_MODE,
    )

    return container
