import time

from fastapi import APIRouter, Depends
from starlette import status

from tally.adapters.inbound.api.dependencies import get_rounding_service
from tally.adapters.inbound.api.outcomes import (
    calculation_failed,
    elapsed_ms,
    record_calculation,
)
from tally.adapters.inbound.api.schemas.error import ErrorResponse
from tally.adapters.inbound.api.schemas.rounding import (
    RoundRequest,
    RoundResponse,
    SmallestUnitRequest,
    SmallestUnitResponse,
)
from tally.domain.exceptions import DomainException
from tally.domain.services import RoundingService
from tally.shared.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/rounding", tags=["Rounding"])


@router.post(
    "/round",
    response_model=RoundResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Value is not a finite decimal",
        },
    },
    summary="Round Value",
    description=(
        "Round a value to a scale with one of nine rounding modes. "
        "Scale and mode default to those of the currency."
    ),
)
async def round_value(
    request: RoundRequest,
    rounding_service: RoundingService = Depends(get_rounding_service),
) -> RoundResponse:
    start_time = time.time()

    try:
        config = rounding_service.registry.get(request.currency)
        scale = config.scale if request.scale is None else request.scale
        mode = request.mode or config.rounding_mode

        adjustment = rounding_service.round_with_adjustment(request.value, scale, mode)

    except (DomainException, ValueError) as e:
        raise calculation_failed("round", start_time, e)

    logger.info(
        "round_completed",
        currency=config.code,
        scale=adjustment.scale,
        mode=adjustment.mode.value,
        adjustment=str(adjustment.adjustment),
        duration_ms=elapsed_ms(start_time),
    )
    record_calculation("round", start_time, adjusted=adjustment.has_adjustment)

    return RoundResponse.from_adjustment(adjustment)


@router.post(
    "/smallest-unit",
    response_model=SmallestUnitResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Amount is not a finite decimal",
        },
    },
    summary="Convert To Minor Units",
    description="Express an amount in the minor unit of its currency (rupees to paise).",
)
async def to_smallest_unit(
    request: SmallestUnitRequest,
    rounding_service: RoundingService = Depends(get_rounding_service),
) -> SmallestUnitResponse:
    start_time = time.time()

    try:
        config = rounding_service.registry.get(request.currency)
        units = rounding_service.to_smallest_unit(request.amount, config.scale)

    except (DomainException, ValueError) as e:
        raise calculation_failed("smallest_unit", start_time, e)

    logger.info(
        "smallest_unit_completed",
        currency=config.code,
        units=str(units),
        duration_ms=elapsed_ms(start_time),
    )
    record_calculation("smallest_unit", start_time)

    return SmallestUnitResponse(
        currency=config.code,
        amount=request.amount,
        units=units,
        smallest_unit=config.smallest_unit,
        scale=config.scale,
    )
