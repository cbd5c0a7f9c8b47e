"""Application cache – CacheEntry, CacheLookup, CacheStats."""
from __future__ import annotations

import dataclasses
from datetime import timedelta
from enum import Enum
from typing import Generic, TypeVar

from storefront_cache.kernel.errors import InvalidCacheOptionsError

__all__ = [
    "CacheEntry",
    "CacheLookup",
    "CacheStats",
    "Freshness",
    "to_seconds",
]

T = TypeVar("T")

Duration = float | int | timedelta


def to_seconds(value: Duration, option: str) -> float:
    """Normalise a duration to float seconds."""
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidCacheOptionsError(
            f"{option} must be a number of seconds or a timedelta", option=option, value=value
        )
    return float(value)


class Freshness(str, Enum):
    FRESH = "fresh"
    STALE = "stale"
    EXPIRED = "expired"


@dataclasses.dataclass(slots=True)
class CacheEntry(Generic[T]):
    """A stored value plus the timestamps that drive its lifecycle.

    ``stored_at`` is a monotonic clock reading; ``ttl`` and ``stale_time``
    are seconds relative to it.
    """

    value: T
    stored_at: float
    ttl: float
    stale_time: float
    tags: frozenset[str] = frozenset()

    def freshness(self, now: float) -> Freshness:
        age = now - self.stored_at
        if age >= self.ttl:
            return Freshness.EXPIRED
        if age >= self.stale_time:
            return Freshness.STALE
        return Freshness.FRESH

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at >= self.ttl

    @property
    def expires_at(self) -> float:
        return self.stored_at + self.ttl

    @property
    def stale_at(self) -> float:
        return self.stored_at + self.stale_time


@dataclasses.dataclass(frozen=True, slots=True)
class CacheLookup(Generic[T]):
    """Result of a successful :meth:`CacheStore.get`."""

    value: T
    is_stale: bool


@dataclasses.dataclass(frozen=True)
class CacheStats:
    """Diagnostic snapshot; not part of the correctness contract."""

    size: int
    hits: int
    misses: int
    evictions: int
    keys: tuple[str, ...] = ()

    @property
    def hit_ratio(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0
