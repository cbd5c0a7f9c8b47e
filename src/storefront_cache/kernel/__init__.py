"""Kernel – framework-agnostic building blocks (errors, clock)."""

from storefront_cache.kernel.errors import (
    BaseError,
    CacheError,
    InvalidCacheOptionsError,
    KeySerializationError,
)
from storefront_cache.kernel.time import Clock, FrozenClock, SystemClock

__all__ = [
    "BaseError",
    "CacheError",
    "Clock",
    "FrozenClock",
    "InvalidCacheOptionsError",
    "KeySerializationError",
    "SystemClock",
]
