"""Shared fixtures: fake clock, fake metrics, and a store wired to both."""

from storefront_cache.testing.fixtures import (  # noqa: F401
    cache_loader,
    cache_store,
    fake_clock,
    fake_metrics,
)
