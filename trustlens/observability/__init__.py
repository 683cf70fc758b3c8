"""Observability: structured logging and Prometheus metrics."""

from trustlens.observability.logging import bind_context, clear_context, get_logger, setup_logging
from trustlens.observability.metrics import MetricsCollector, get_metrics

__all__ = [
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "MetricsCollector",
    "get_metrics",
]
