from .metrics import Metrics, generate_metrics, get_metrics_registry, init_metrics

__all__ = [
    "Metrics",
    "init_metrics",
    "get_metrics_registry",
    "generate_metrics",
]
