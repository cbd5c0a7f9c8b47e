"""Testing fakes – in-memory doubles for kernel and observability ports."""
from storefront_cache.testing.fakes.clock import FakeClock
from storefront_cache.testing.fakes.metrics import FakeMetricsRegistry
from storefront_cache.kernel.time import FrozenClock

__all__ = ["FakeClock", "FakeMetricsRegistry", "FrozenClock"]
