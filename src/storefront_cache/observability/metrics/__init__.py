"""Observability – metrics ports."""
from storefront_cache.observability.metrics.ports import Counter, Gauge, Metrics
from storefront_cache.observability.metrics.noop import NoopMetrics

__all__ = ["Counter", "Gauge", "Metrics", "NoopMetrics"]
