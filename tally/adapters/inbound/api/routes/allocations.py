import time

from fastapi import APIRouter, Depends
from starlette import status

from tally.adapters.inbound.api.dependencies import get_distribution_service
from tally.adapters.inbound.api.outcomes import (
    calculation_failed,
    elapsed_ms,
    record_calculation,
)
from tally.adapters.inbound.api.schemas.allocations import (
    AllocateRequest,
    AllocationResponse,
    DistributeRequest,
)
from tally.adapters.inbound.api.schemas.error import ErrorResponse
from tally.domain.exceptions import DomainException
from tally.domain.services import DistributionService
from tally.shared.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/allocations", tags=["Allocations"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {
        "model": ErrorResponse,
        "description": "Invalid part count or weights",
    },
    status.HTTP_422_UNPROCESSABLE_ENTITY: {
        "model": ErrorResponse,
        "description": "Weights sum to zero or validation error",
    },
    status.HTTP_500_INTERNAL_SERVER_ERROR: {
        "model": ErrorResponse,
        "description": "Rounding residual could not be redistributed",
    },
}


@router.post(
    "/distribute",
    response_model=AllocationResponse,
    responses=ERROR_RESPONSES,
    summary="Distribute Evenly",
    description="Split a total into equal shares that sum exactly to the total.",
)
async def distribute(
    request: DistributeRequest,
    distribution_service: DistributionService = Depends(get_distribution_service),
) -> AllocationResponse:
    start_time = time.time()

    try:
        currency = distribution_service.resolve_currency(request.currency)
        parts = distribution_service.distribute(request.total, request.parts, currency)

    except (DomainException, ValueError) as e:
        raise calculation_failed("distribute", start_time, e)

    logger.info(
        "distribute_completed",
        currency=currency,
        total=str(request.total),
        parts=request.parts,
        duration_ms=elapsed_ms(start_time),
    )
    record_calculation("distribute", start_time)

    return AllocationResponse(currency=currency, total=request.total, parts=parts)


@router.post(
    "/allocate",
    response_model=AllocationResponse,
    responses=ERROR_RESPONSES,
    summary="Allocate By Weight",
    description="Split a total proportionally to weights; shares sum exactly to the total.",
)
async def allocate(
    request: AllocateRequest,
    distribution_service: DistributionService = Depends(get_distribution_service),
) -> AllocationResponse:
    start_time = time.time()

    try:
        currency = distribution_service.resolve_currency(request.currency)
        parts = distribution_service.allocate(request.total, request.weights, currency)

    except (DomainException, ValueError) as e:
        raise calculation_failed("allocate", start_time, e)

    logger.info(
        "allocate_completed",
        currency=currency,
        total=str(request.total),
        parts=len(parts),
        duration_ms=elapsed_ms(start_time),
    )
    record_calculation("allocate", start_time)

    return AllocationResponse(currency=currency, total=request.total, parts=parts)
