"""Testing generators – property-based test data for cache keys and entries."""
from storefront_cache.testing.generators.strategies import (
    cache_key_strategy,
    entry_options_strategy,
    key_part_strategy,
)

__all__ = ["cache_key_strategy", "entry_options_strategy", "key_part_strategy"]
