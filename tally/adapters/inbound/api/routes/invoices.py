import time

from fastapi import APIRouter, Depends
from starlette import status

from tally.adapters.inbound.api.dependencies import get_calculate_invoice_query_handler
from tally.adapters.inbound.api.outcomes import (
    calculation_failed,
    elapsed_ms,
    record_calculation,
)
from tally.adapters.inbound.api.schemas.error import ErrorResponse
from tally.adapters.inbound.api.schemas.invoices import (
    InvoiceQueryMapper,
    InvoiceRequest,
    InvoiceResponse,
)
from tally.app.queries import CalculateInvoiceQueryHandler
from tally.domain.exceptions import DomainException
from tally.shared.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post(
    "",
    response_model=InvoiceResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid input parameters",
        },
        status.HTTP_409_CONFLICT: {
            "model": ErrorResponse,
            "description": "A line is in a different currency than the invoice",
        },
    },
    summary="Calculate Invoice",
    description=(
        "Calculate derived and entered-total lines, aggregate them and verify "
        "that the grand total equals the sum of the line totals."
    ),
)
async def calculate_invoice(
    request: InvoiceRequest,
    handler: CalculateInvoiceQueryHandler = Depends(get_calculate_invoice_query_handler),
) -> InvoiceResponse:
    start_time = time.time()

    try:
        query = InvoiceQueryMapper.map_request_to_query(request)

        logger.info(
            "invoice_requested",
            currency=request.currency,
            line_count=len(query.lines),
        )

        invoice = await handler.handle(query)

    except (DomainException, ValueError) as e:
        raise calculation_failed("invoice", start_time, e)

    logger.info(
        "invoice_completed",
        currency=invoice.aggregation.currency,
        grand_total=str(invoice.aggregation.grand_total),
        is_valid=invoice.integrity.is_valid,
        duration_ms=elapsed_ms(start_time),
    )
    record_calculation(
        "invoice", start_time, adjusted=invoice.aggregation.has_adjustments
    )

    return InvoiceQueryMapper.map_invoice_to_response(invoice)
