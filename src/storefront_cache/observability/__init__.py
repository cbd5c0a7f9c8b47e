"""Observability – structured logging and metrics ports."""

from storefront_cache.observability.logging import JsonLoggerFactory, get_logger
from storefront_cache.observability.metrics import Counter, Gauge, Metrics, NoopMetrics

__all__ = [
    "Counter",
    "Gauge",
    "JsonLoggerFactory",
    "Metrics",
    "NoopMetrics",
    "get_logger",
]
