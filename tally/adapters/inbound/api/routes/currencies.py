from fastapi import APIRouter, Depends, HTTPException
from starlette import status

from tally.adapters.inbound.api.dependencies import get_currency_registry
from tally.adapters.inbound.api.schemas.currencies import CurrencyResponse
from tally.adapters.inbound.api.schemas.error import ErrorResponse
from tally.domain.services import CurrencyRegistry
from tally.domain.values import Currency
from tally.shared.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/currencies", tags=["Currencies"])


@router.get(
    "/{code}",
    response_model=CurrencyResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Malformed currency code",
        },
    },
    summary="Currency Metadata",
    description=(
        "Scale, rounding mode and display hints of a currency. Unknown codes "
        "get the default scale and are flagged with supported=false."
    ),
)
async def get_currency(
    code: str,
    registry: CurrencyRegistry = Depends(get_currency_registry),
) -> CurrencyResponse:
    try:
        currency = Currency(code.strip())
    except ValueError as e:
        logger.warning("currency_lookup_rejected", code=code, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    supported = registry.is_supported(currency)
    if not supported:
        logger.info("currency_lookup_fallback", code=currency.code)

    return CurrencyResponse.from_config(registry.get(currency), supported=supported)
