"""Application cache – keys, store, read-through loader and presets."""
from storefront_cache.application.cache.keys import SEPARATOR, CacheKey
from storefront_cache.application.cache.entry import CacheEntry, CacheLookup, CacheStats, Freshness
from storefront_cache.application.cache.store import (
    CacheStore,
    EvictionCallback,
    InvalidationListener,
    InvalidationMatcher,
)
from storefront_cache.application.cache.loader import CacheLoader, LoadResult
from storefront_cache.application.cache.decorators import CacheWarmupService, cached
from storefront_cache.application.cache.presets import (
    CacheTags,
    CacheTTL,
    invalidate_product_cache,
    invalidate_user_cache,
    user_tag,
)

__all__ = [
    "SEPARATOR",
    "CacheEntry",
    "CacheKey",
    "CacheLoader",
    "CacheLookup",
    "CacheStats",
    "CacheStore",
    "CacheTTL",
    "CacheTags",
    "CacheWarmupService",
    "EvictionCallback",
    "Freshness",
    "InvalidationListener",
    "InvalidationMatcher",
    "LoadResult",
    "cached",
    "invalidate_product_cache",
    "invalidate_user_cache",
    "user_tag",
]
