import time

from fastapi import APIRouter, Depends
from starlette import status

from tally.adapters.inbound.api.dependencies import get_tax_service
from tally.adapters.inbound.api.outcomes import (
    calculation_failed,
    elapsed_ms,
    record_calculation,
)
from tally.adapters.inbound.api.schemas.error import ErrorResponse
from tally.adapters.inbound.api.schemas.taxes import (
    GSTRequest,
    GSTResponse,
    TaxSplitRequest,
    TaxSplitResponse,
)
from tally.domain.exceptions import DomainException
from tally.domain.services import TaxService
from tally.shared.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/taxes", tags=["Taxes"])


@router.post(
    "/gst",
    response_model=GSTResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid input parameters",
        },
    },
    summary="Calculate GST",
    description="GST on a base amount as two independently rounded halves.",
)
async def calculate_gst(
    request: GSTRequest,
    tax_service: TaxService = Depends(get_tax_service),
) -> GSTResponse:
    start_time = time.time()

    try:
        breakdown = tax_service.calculate_gst(
            request.base_amount, request.gst_rate, request.currency
        )

    except (DomainException, ValueError) as e:
        raise calculation_failed("gst", start_time, e)

    logger.info(
        "gst_completed",
        gst_amount=str(breakdown.gst_amount),
        duration_ms=elapsed_ms(start_time),
    )
    record_calculation("gst", start_time)

    return GSTResponse(
        gst_amount=breakdown.gst_amount,
        cgst=breakdown.cgst,
        sgst=breakdown.sgst,
        total_with_gst=breakdown.total_with_gst,
    )


@router.post(
    "/split",
    response_model=TaxSplitResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid input parameters",
        },
    },
    summary="Split Tax",
    description="Split a tax amount into CGST and SGST; SGST takes the remainder.",
)
async def split_tax(
    request: TaxSplitRequest,
    tax_service: TaxService = Depends(get_tax_service),
) -> TaxSplitResponse:
    start_time = time.time()

    try:
        split = tax_service.split_tax_cgst_sgst(request.tax_amount, request.currency)

    except (DomainException, ValueError) as e:
        raise calculation_failed("tax_split", start_time, e)

    logger.info(
        "tax_split_completed",
        cgst=str(split.cgst),
        sgst=str(split.sgst),
        duration_ms=elapsed_ms(start_time),
    )
    record_calculation("tax_split", start_time)

    return TaxSplitResponse(cgst=split.cgst, sgst=split.sgst)
