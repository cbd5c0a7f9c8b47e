"""Application cache – storefront TTL presets, tags and invalidation helpers."""
from __future__ import annotations

from typing import Any

from storefront_cache.application.cache.store import CacheStore

__all__ = [
    "CacheTTL",
    "CacheTags",
    "invalidate_product_cache",
    "invalidate_user_cache",
    "user_tag",
]


class CacheTTL:
    """Preset lifetimes, in seconds."""

    SHORT = 2 * 60.0
    MEDIUM = 10 * 60.0
    LONG = 30 * 60.0
    HOUR = 60 * 60.0


class CacheTags:
    PRODUCTS = "products"
    ORDERS = "orders"
    CART = "cart"
    PROFILE = "profile"
    AUTH = "auth"


def user_tag(user_id: str | int) -> str:
    """Tag for every entry that belongs to one shopper."""
    return f"user:{user_id}"


def invalidate_product_cache(store: CacheStore[Any]) -> int:
    return store.invalidate(tag=CacheTags.PRODUCTS)


def invalidate_user_cache(store: CacheStore[Any], user_id: str | int | None = None) -> int:
    """Drop a shopper's cached data.

    With *user_id*, removes entries tagged :func:`user_tag`.  Without it,
    removes all profile and order data.
    """
    if user_id is not None:
        return store.invalidate(tag=user_tag(user_id))
    return store.invalidate(tag=CacheTags.PROFILE) + store.invalidate(tag=CacheTags.ORDERS)
