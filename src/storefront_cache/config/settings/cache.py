"""Config settings – CacheSettings."""
from __future__ import annotations

import dataclasses

from storefront_cache.config.settings.base import Settings
from storefront_cache.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class CacheSettings(Settings):
    """Store-wide defaults, read from ``CACHE_*`` environment variables.

    ``default_stale_time`` of ``None`` means entries written without explicit
    options are never stale, only fresh or expired.  ``max_size`` of ``0``
    disables the LRU bound.
    """

    _prefix = "CACHE"

    default_ttl: float = 600.0
    default_stale_time: float | None = None
    max_size: int = 500

    def _validate(self) -> None:
        if self.default_ttl <= 0:
            raise InvalidSettingValueError("default_ttl", self.default_ttl, "must be positive")
        if self.default_stale_time is not None:
            if self.default_stale_time < 0:
                raise InvalidSettingValueError(
                    "default_stale_time", self.default_stale_time, "must not be negative"
                )
            if self.default_stale_time > self.default_ttl:
                raise InvalidSettingValueError(
                    "default_stale_time",
                    self.default_stale_time,
                    f"must not exceed default_ttl ({self.default_ttl})",
                )
        if self.max_size < 0:
            raise InvalidSettingValueError("max_size", self.max_size, "must be 0 (unbounded) or positive")


__all__ = ["CacheSettings"]
