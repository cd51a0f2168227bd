from functools import lru_cache
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from tally.shared.logging import get_logger

logger = get_logger(__name__)


class Metrics:
    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=self.registry,
        )
        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request latency",
            ["method", "endpoint"],
            registry=self.registry,
        )

        self.calculations_total = Counter(
            "calculations_total",
            "Total calculations served",
            ["operation", "status"],
            registry=self.registry,
        )
        self.calculation_duration_seconds = Histogram(
            "calculation_duration_seconds",
            "Calculation processing time",
            ["operation"],
            registry=self.registry,
        )

        self.rounding_adjustments_total = Counter(
            "rounding_adjustments_total",
            "Results that needed a rounding adjustment",
            ["operation"],
            registry=self.registry,
        )

        logger.info("metrics_initialized")


@lru_cache()
def get_metrics_registry() -> Metrics:
    return Metrics()


def init_metrics() -> Metrics:
    get_metrics_registry.cache_clear()
    return get_metrics_registry()


def generate_metrics() -> tuple[str, str]:
    metrics = get_metrics_registry()
    content = generate_latest(metrics.registry)
    return content.decode("utf-8"), CONTENT_TYPE_LATEST
