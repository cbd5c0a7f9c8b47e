"""Testing support – fakes, fixtures and property-based generators.

Import in your ``conftest.py``::

    pytest_plugins = ["storefront_cache.testing.fixtures"]
"""

from storefront_cache.testing.fakes import FakeClock, FakeMetricsRegistry, FrozenClock
from storefront_cache.testing.generators import (
    cache_key_strategy,
    entry_options_strategy,
    key_part_strategy,
)

__all__ = [
    "FakeClock",
    "FakeMetricsRegistry",
    "FrozenClock",
    "cache_key_strategy",
    "entry_options_strategy",
    "key_part_strategy",
]
