"""Observability – NoopMetrics implementation."""
from __future__ import annotations

from storefront_cache.observability.metrics.ports import Counter, Gauge, Metrics


class _NoopCounter(Counter):
    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        pass


class _NoopGauge(Gauge):
    def set(self, value: float, labels: dict[str, str] | None = None) -> None:
        pass


class NoopMetrics(Metrics):
    """Silent metrics sink, the default when no backend is configured."""

    _counter = _NoopCounter()
    _gauge = _NoopGauge()

    def counter(self, name: str, description: str = "", unit: str = "") -> Counter:
        return self._counter

    def gauge(self, name: str, description: str = "", unit: str = "") -> Gauge:
        return self._gauge


__all__ = ["NoopMetrics"]
