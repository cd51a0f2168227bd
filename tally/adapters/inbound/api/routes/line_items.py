import time

from fastapi import APIRouter, Depends
from starlette import status

from tally.adapters.inbound.api.dependencies import get_line_item_service
from tally.adapters.inbound.api.outcomes import (
    calculation_failed,
    elapsed_ms,
    record_calculation,
)
from tally.adapters.inbound.api.schemas.error import ErrorResponse
from tally.adapters.inbound.api.schemas.line_items import (
    LineItemFromTotalRequest,
    LineItemMapper,
    LineItemRequest,
    LineItemResponse,
)
from tally.domain.exceptions import DomainException
from tally.domain.services import LineItemService
from tally.shared.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/line-items", tags=["Line Items"])


@router.post(
    "",
    response_model=LineItemResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid input parameters",
        },
    },
    summary="Calculate Line Item",
    description=(
        "Calculate a line forward from its unit price. Out-of-range inputs are "
        "clamped and reported in validation_errors."
    ),
)
async def calculate_line_item(
    request: LineItemRequest,
    line_item_service: LineItemService = Depends(get_line_item_service),
) -> LineItemResponse:
    start_time = time.time()

    try:
        result = line_item_service.calculate(request.to_input())

    except (DomainException, ValueError) as e:
        raise calculation_failed("line_item", start_time, e)

    logger.info(
        "line_item_completed",
        currency=result.currency,
        total=str(result.calculated.total),
        clamped=len(result.validation_errors),
        duration_ms=elapsed_ms(start_time),
    )
    record_calculation("line_item", start_time)

    return LineItemMapper.map_result_to_response(result)


@router.post(
    "/from-total",
    response_model=LineItemResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid input parameters",
        },
    },
    summary="Back-solve Line Item",
    description=(
        "Back-solve the unit price of a line from its entered total. The entered "
        "total is kept; any difference with the displayed price is returned as "
        "rounding_adjustment."
    ),
)
async def calculate_line_item_from_total(
    request: LineItemFromTotalRequest,
    line_item_service: LineItemService = Depends(get_line_item_service),
) -> LineItemResponse:
    start_time = time.time()

    try:
        result = line_item_service.calculate_from_total(
            request.total,
            request.quantity,
            request.tax_rate,
            request.discount_amount,
            request.currency,
        )

    except (DomainException, ValueError) as e:
        raise calculation_failed("line_item_from_total", start_time, e)

    logger.info(
        "line_item_from_total_completed",
        currency=result.currency,
        total=str(result.calculated.total),
        displayed_unit_price=str(result.displayed_unit_price),
        rounding_adjustment=str(result.rounding_adjustment),
        duration_ms=elapsed_ms(start_time),
    )
    record_calculation(
        "line_item_from_total", start_time, adjusted=result.has_adjustment
    )

    return LineItemMapper.map_result_to_response(result)
