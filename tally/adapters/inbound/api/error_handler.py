from fastapi import HTTPException
from starlette import status

from tally.domain.exceptions import (
    CurrencyMismatchError,
    DivisionByZeroError,
    ResidualRedistributionError,
)


def handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, DivisionByZeroError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )

    if isinstance(exc, CurrencyMismatchError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        )

    if isinstance(exc, ResidualRedistributionError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )

    if isinstance(exc, ValueError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        )

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected internal error occurred.",
    )
