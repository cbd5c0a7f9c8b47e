"""Application – use-case building blocks (framework-agnostic)."""

from storefront_cache.application.cache import (
    CacheKey,
    CacheLoader,
    CacheLookup,
    CacheStats,
    CacheStore,
    CacheWarmupService,
    LoadResult,
    cached,
)

__all__ = [
    "CacheKey",
    "CacheLoader",
    "CacheLookup",
    "CacheStats",
    "CacheStore",
    "CacheWarmupService",
    "LoadResult",
    "cached",
]
