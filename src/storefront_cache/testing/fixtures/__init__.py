"""Testing fixtures – pytest fixtures for the cache and its fakes."""
try:
    import pytest  # noqa: F401

    from storefront_cache.testing.fixtures.cache import (
        cache_loader,
        cache_store,
        fake_clock,
        fake_metrics,
    )

except ImportError:
    pass

__all__ = ["cache_loader", "cache_store", "fake_clock", "fake_metrics"]
