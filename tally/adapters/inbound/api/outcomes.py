import time

from fastapi import HTTPException

from tally.adapters.inbound.api.error_handler import handle_domain_error
from tally.domain.exceptions import ResidualRedistributionError
from tally.shared.config import get_settings
from tally.shared.logging import get_logger
from tally.shared.observability import get_metrics_registry

logger = get_logger(__name__)


def elapsed_ms(start_time: float) -> float:
    return round((time.time() - start_time) * 1000, 2)


def record_calculation(operation: str, start_time: float, adjusted: bool = False) -> None:
    if not get_settings().ENABLE_METRICS:
        return

    metrics = get_metrics_registry()
    metrics.calculations_total.labels(operation=operation, status="success").inc()
    metrics.calculation_duration_seconds.labels(operation=operation).observe(
        time.time() - start_time
    )

    if adjusted:
        metrics.rounding_adjustments_total.labels(operation=operation).inc()


def calculation_failed(operation: str, start_time: float, exc: Exception) -> HTTPException:
    """
    Log a failed calculation, count it, and map the error to an HTTP error.

    :param operation: Name of the calculation, used as the metrics label
    :param start_time: ``time.time()`` at the start of the request
    :param exc: Domain or validation error raised by the calculation
    """
    if isinstance(exc, ResidualRedistributionError):
        logger.error(
            f"{operation}_failed",
            error_type=type(exc).__name__,
            error=str(exc),
            duration_ms=elapsed_ms(start_time),
            exc_info=True,
        )
    else:
        logger.warning(
            f"{operation}_failed",
            error_type=type(exc).__name__,
            error=str(exc),
            duration_ms=elapsed_ms(start_time),
        )

    if get_settings().ENABLE_METRICS:
        metrics = get_metrics_registry()
        metrics.calculations_total.labels(
            operation=operation, status=type(exc).__name__
        ).inc()

    return handle_domain_error(exc)
