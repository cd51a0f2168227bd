import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import ValidationError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from tally.adapters.inbound.api.routes import (
    allocations,
    currencies,
    health,
    invoices,
    line_items,
    rounding,
    taxes,
)
from tally.shared.config import get_settings
from tally.shared.di import cleanup_resources, get_container
from tally.shared.logging import configure_logging, get_logger
from tally.shared.observability import (
    generate_metrics,
    get_metrics_registry,
    init_metrics,
)

settings = get_settings()

configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)

logger = get_logger(__name__)

if settings.ENABLE_METRICS:
    init_metrics()
    logger.info("metrics_enabled")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("api_starting_up")

    container = get_container(app_type="api")
    app.state.container = container

    registry = container.currency_registry()
    logger.info(
        "currency_registry_loaded",
        currencies=len(registry.codes()),
        default_currency=registry.default_currency,
    )

    yield

    logger.info("api_shutting_down")

    await cleanup_resources(container)

    logger.info("api_shutdown_complete")


app = FastAPI(
    title="Tally API",
    description=(
        "Currency-aware rounding, exact-sum allocation and invoice line "
        "calculation with auditable rounding adjustments"
    ),
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(rounding.router)
app.include_router(allocations.router)
app.include_router(line_items.router)
app.include_router(invoices.router)
app.include_router(taxes.router)
app.include_router(currencies.router)
app.include_router(health.router)


@app.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/docs")


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    if not settings.ENABLE_METRICS:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Metrics are disabled"},
        )

    content, content_type = generate_metrics()
    return Response(content=content, media_type=content_type)


def _join_errors(errors: list) -> str:
    error_messages = []

    for error in errors:
        field = ".".join(str(x) for x in error["loc"])
        msg = error["msg"]
        error_messages.append(f"{field}: {msg}")

    return "; ".join(error_messages)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning(
        "request_validation_error",
        path=request.url.path,
        method=request.method,
        errors=_join_errors(exc.errors()),
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": _join_errors(exc.errors())},
    )


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    logger.warning(
        "pydantic_validation_error",
        path=request.url.path,
        method=request.method,
        errors=_join_errors(exc.errors()),
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": _join_errors(exc.errors())},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    logger.warning(
        "domain_validation_error",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    logger.warning(
        "http_exception",
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
        detail=exc.detail,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal server error occurred"},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    try:
        response = await call_next(request)
        duration = time.time() - start_time

        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        if settings.ENABLE_METRICS:
            mtr = get_metrics_registry()
            mtr.http_requests_total.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code,
            ).inc()
            mtr.http_request_duration_seconds.labels(
                method=request.method, endpoint=request.url.path
            ).observe(duration)

        return response

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            "http_request_failed",
            method=request.method,
            path=request.url.path,
            error=str(e),
            duration_ms=round(duration * 1000, 2),
            exc_info=True,
        )
        raise
