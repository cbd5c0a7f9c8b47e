"""
storefront_cache – read-through cache with TTL and staleness tracking.

Import path convention::

    from storefront_cache.application.cache import CacheKey, CacheStore, CacheLoader
    from storefront_cache.config import CacheSettings, EnvSettingsLoader
    from storefront_cache.kernel.errors import InvalidCacheOptionsError
"""

from storefront_cache.application.cache import (
    CacheKey,
    CacheLoader,
    CacheLookup,
    CacheStats,
    CacheStore,
    CacheTags,
    CacheTTL,
)
from storefront_cache.config import CacheSettings

__version__ = "0.1.0"
__all__ = [
    "CacheKey",
    "CacheLoader",
    "CacheLookup",
    "CacheSettings",
    "CacheStats",
    "CacheStore",
    "CacheTTL",
    "CacheTags",
    "__version__",
]
