from decimal import Decimal

from fastapi import APIRouter, Depends

from tally.adapters.inbound.api.dependencies import (
    get_currency_registry,
    get_rounding_service,
)
from tally.adapters.inbound.api.schemas.health import (
    HealthCheckResponse,
    ServiceHealthResponse,
)
from tally.domain.services import CurrencyRegistry, RoundingService
from tally.domain.values import RoundingMode
from tally.shared.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=ServiceHealthResponse,
    summary="Health Check",
    description="Check that the currency table is loaded and rounding behaves",
)
async def health_check(
    registry: CurrencyRegistry = Depends(get_currency_registry),
    rounding_service: RoundingService = Depends(get_rounding_service),
) -> ServiceHealthResponse:
    checks: dict[str, HealthCheckResponse] = {}

    if registry.codes():
        checks["currency_registry"] = HealthCheckResponse(status="healthy", error=None)
        logger.debug("health_check_currency_registry", status="healthy")
    else:
        checks["currency_registry"] = HealthCheckResponse(
            status="unhealthy", error="Currency table is empty"
        )
        logger.warning("health_check_currency_registry", status="unhealthy")

    rounded = rounding_service.round(Decimal("2.5"), 0, RoundingMode.HALF_EVEN)
    if rounded == 2:
        checks["rounding"] = HealthCheckResponse(status="healthy", error=None)
        logger.debug("health_check_rounding", status="healthy")
    else:
        error = f"HALF_EVEN rounded 2.5 to {rounded}"
        checks["rounding"] = HealthCheckResponse(status="unhealthy", error=error)
        logger.warning("health_check_rounding", status="unhealthy", error=error)

    overall = (
        "healthy"
        if all(c.status == "healthy" for c in checks.values())
        else "unhealthy"
    )

    logger.info("health_check_complete", overall_status=overall)

    return ServiceHealthResponse(status=overall, checks=checks)
