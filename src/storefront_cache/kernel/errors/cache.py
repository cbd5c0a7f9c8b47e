"""Cache errors – misconfigured entries and unusable key parts.

Absence of a key is never an error; these are raised only for caller
mistakes, at the call that introduced them.
"""

from __future__ import annotations

from typing import Any

from storefront_cache.kernel.errors.base import BaseError


class CacheError(BaseError):
    """Base class for cache usage errors."""

    default_code = "cache_error"


class InvalidCacheOptionsError(CacheError):
    """Entry options are inconsistent (e.g. ``stale_time > ttl``)."""

    default_code = "invalid_cache_options"

    def __init__(
        self,
        message: str,
        *,
        option: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.option = option
        self.value = value
        if option is not None:
            self.detail.setdefault("option", option)
            self.detail.setdefault("value", value)


class KeySerializationError(CacheError):
    """A key part cannot be rendered deterministically."""

    default_code = "key_serialization_error"

    def __init__(
        self,
        message: str,
        *,
        part: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.part = part
        self.detail.setdefault("part_type", type(part).__name__)


__all__ = ["CacheError", "InvalidCacheOptionsError", "KeySerializationError"]
