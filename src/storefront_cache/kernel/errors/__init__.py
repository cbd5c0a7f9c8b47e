"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── CacheError                   (cache.py)
    │   ├── InvalidCacheOptionsError
    │   └── KeySerializationError
    └── ConfigError                  (storefront_cache.config.validation)
"""

from storefront_cache.kernel.errors.base import BaseError
from storefront_cache.kernel.errors.cache import (
    CacheError,
    InvalidCacheOptionsError,
    KeySerializationError,
)

__all__ = [
    "BaseError",
    "CacheError",
    "InvalidCacheOptionsError",
    "KeySerializationError",
]
