"""Application cache – CacheStore.

An in-memory, synchronous read-through cache with freshness tracking.
Entries move through ``fresh -> stale -> expired``; expired entries are
logically absent the moment their TTL elapses and are physically removed
lazily (on the next read, by :meth:`CacheStore.sweep`, or when the store
needs room).

The store is meant to be owned by the application's composition root and
handed to its consumers; there is no module-level instance.  All operations
run to completion without awaiting, so on a single event loop no locking is
needed.  The store never deduplicates concurrent fetches;
:class:`~storefront_cache.application.cache.loader.CacheLoader` does that.
"""
from __future__ import annotations

import math
from collections import OrderedDict
from itertools import islice
from collections.abc import Callable, Iterable, Iterator
from datetime import timedelta
from typing import Generic, TypeVar

from storefront_cache.application.cache.entry import (
    CacheEntry,
    CacheLookup,
    CacheStats,
    Freshness,
    to_seconds,
)
from storefront_cache.config.settings import CacheSettings
from storefront_cache.kernel.errors import InvalidCacheOptionsError
from storefront_cache.kernel.time import Clock, SystemClock
from storefront_cache.observability.logging import get_logger
from storefront_cache.observability.metrics import Metrics, NoopMetrics

__all__ = ["CacheStore", "EvictionCallback", "InvalidationListener", "InvalidationMatcher"]

T = TypeVar("T")

EvictionCallback = Callable[[str, T], None]
InvalidationMatcher = Callable[[str, frozenset[str]], bool]
InvalidationListener = Callable[[InvalidationMatcher], None]

_EXPIRED = "expired"
_CAPACITY = "capacity"
_INVALIDATED = "invalidated"


class CacheStore(Generic[T]):
    """Key → value store with TTL, staleness, tags and an optional LRU bound.

    Parameters
    ----------
    settings:
        Store-wide defaults (``default_ttl``, ``default_stale_time``,
        ``max_size``).  Defaults to :class:`CacheSettings` ``()``.
    clock:
        Time source; :class:`SystemClock` unless a test clock is injected.
    metrics:
        Sink for hit/miss/eviction counters and the entry-count gauge.
    on_evict:
        ``callback(key, value)`` invoked for every entry the store removes
        (invalidation, expiry, sweep, capacity).  Not called when ``set``
        overwrites a key.  Callbacks run once every removal of the
        operation has landed; a callback that raises is logged as
        ``cache.evict_callback_failed`` and the rest still run.
    name:
        Label attached to logs and metrics when several stores coexist.
    """

    def __init__(
        self,
        settings: CacheSettings | None = None,
        *,
        clock: Clock | None = None,
        metrics: Metrics | None = None,
        on_evict: EvictionCallback[T] | None = None,
        name: str = "default",
    ) -> None:
        self._settings = settings or CacheSettings()
        self._clock = clock or SystemClock()
        self._on_evict = on_evict
        self._name = name
        self._entries: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._listeners: list[InvalidationListener] = []

        self._log = get_logger(__name__, cache=name)
        metrics = metrics or NoopMetrics()
        self._labels = {"cache": name}
        self._hit_counter = metrics.counter("cache_hits_total", "Cache lookups served from the store")
        self._miss_counter = metrics.counter("cache_misses_total", "Cache lookups that found nothing live")
        self._eviction_counter = metrics.counter("cache_evictions_total", "Entries removed from the store")
        self._size_gauge = metrics.gauge("cache_entries", "Entries physically held by the store")

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def get(self, key: str) -> CacheLookup[T] | None:
        """Return the live entry for *key*, or ``None`` if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._record_miss()
            return None

        state = entry.freshness(self._clock.monotonic())
        if state is Freshness.EXPIRED:
            self._purge([key], _EXPIRED)
            self._record_miss()
            return None

        self._entries.move_to_end(key)
        self._hits += 1
        self._hit_counter.add(1, self._labels)
        return CacheLookup(value=entry.value, is_stale=state is Freshness.STALE)

    def set(
        self,
        key: str,
        value: T,
        *,
        ttl: float | timedelta | None = None,
        stale_time: float | timedelta | None = None,
        tags: Iterable[str] = (),
    ) -> None:
        """Store *value* under *key*, replacing any prior entry.

        ``stale_time`` defaults to ``ttl`` (the entry is never stale).  When
        both are omitted the store defaults from :class:`CacheSettings`
        apply.  Raises :class:`InvalidCacheOptionsError` when
        ``stale_time > ttl`` or either is out of range.
        """
        ttl_s, stale_s = self._resolve_durations(ttl, stale_time)
        entry = CacheEntry(
            value=value,
            stored_at=self._clock.monotonic(),
            ttl=ttl_s,
            stale_time=stale_s,
            tags=self._normalise_tags(tags),
        )
        self._entries[key] = entry
        self._entries.move_to_end(key)
        self._enforce_capacity()
        self._size_gauge.set(len(self._entries), self._labels)

    def invalidate(self, prefix: str | None = None, *, tag: str | None = None) -> int:
        """Remove entries and return how many were removed.

        * ``invalidate()`` clears the whole store.
        * ``invalidate("products")`` removes every key that *starts with*
          ``"products"``.  It is a plain prefix test: ``"order"`` also
          matches ``"orders:1"`` but never ``"export:orders"``.  Pass the
          separator (``"order:"``) to stay inside one namespace.
        * ``invalidate(tag="orders")`` removes every entry carrying the tag.

        Invalidation listeners hear about the call even when nothing is
        stored yet, so a fetch already in flight for a matching key does not
        write its result back.
        """
        if prefix is not None and tag is not None:
            raise InvalidCacheOptionsError(
                "invalidate() takes a key prefix or a tag, not both", option="tag", value=tag
            )
        if tag is not None and not isinstance(tag, str):
            raise InvalidCacheOptionsError("tag must be a string", option="tag", value=tag)
        if prefix is not None and not isinstance(prefix, str):
            raise InvalidCacheOptionsError("prefix must be a string", option="prefix", value=prefix)

        matches = self._matcher(prefix, tag)
        doomed = [k for k, e in self._entries.items() if matches(k, e.tags)]
        doomed_keys = frozenset(doomed)
        self._announce(lambda key, tags: key in doomed_keys or matches(key, tags))
        self._purge(doomed, _INVALIDATED)
        self._log.debug("cache.invalidated", prefix=prefix, tag=tag, removed=len(doomed))
        return len(doomed)

    def get_stats(self) -> CacheStats:
        """Snapshot of live entries and counters.  Does not evict."""
        now = self._clock.monotonic()
        live = tuple(k for k, e in self._entries.items() if not e.is_expired(now))
        return CacheStats(
            size=len(live),
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
            keys=live,
        )

    # ------------------------------------------------------------------
    # Convenience operations
    # ------------------------------------------------------------------

    def invalidate_tag(self, tag: str) -> int:
        return self.invalidate(tag=tag)

    def delete(self, key: str) -> bool:
        """Remove *key*; ``True`` if anything was stored under it."""
        self._announce(lambda k, _tags: k == key)
        if key not in self._entries:
            return False
        self._purge([key], _INVALIDATED)
        return True

    def add_invalidation_listener(self, listener: InvalidationListener) -> None:
        """Call ``listener(matches)`` on every :meth:`invalidate` and :meth:`delete`.

        ``matches(key, tags)`` is true for the keys the call targets,
        including keys that are not stored yet.
        """
        self._listeners.append(listener)

    def remove_invalidation_listener(self, listener: InvalidationListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def has(self, key: str) -> bool:
        """``True`` when :meth:`get` would return a lookup.  Not counted in stats."""
        return self._live_entry(key) is not None

    def update(self, key: str, updater: Callable[[T], T]) -> bool:
        """Replace a live entry's value with ``updater(value)``.

        The entry keeps its ttl, stale time and tags, and its clock restarts.
        Returns ``False`` without calling *updater* when *key* is not live.
        """
        entry = self._live_entry(key)
        if entry is None:
            return False
        new_value = updater(entry.value)
        entry.value = new_value
        entry.stored_at = self._clock.monotonic()
        self._entries.move_to_end(key)
        return True

    def sweep(self) -> int:
        """Physically drop every expired entry; returns the count."""
        now = self._clock.monotonic()
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        return self._purge(expired, _EXPIRED)

    def reset_stats(self) -> None:
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def keys(self) -> Iterator[str]:
        """Iterate live keys, least recently used first."""
        now = self._clock.monotonic()
        return (k for k, e in list(self._entries.items()) if not e.is_expired(now))

    @property
    def name(self) -> str:
        return self._name

    @property
    def settings(self) -> CacheSettings:
        return self._settings

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __repr__(self) -> str:
        return f"CacheStore(name={self._name!r}, entries={len(self._entries)})"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _live_entry(self, key: str) -> CacheEntry[T] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock.monotonic()):
            self._purge([key], _EXPIRED)
            return None
        return entry

    def _resolve_durations(
        self,
        ttl: float | timedelta | None,
        stale_time: float | timedelta | None,
    ) -> tuple[float, float]:
        if ttl is None:
            ttl_s = self._settings.default_ttl
            if stale_time is None:
                default_stale = self._settings.default_stale_time
                stale_s = ttl_s if default_stale is None else default_stale
            else:
                stale_s = to_seconds(stale_time, "stale_time")
        else:
            ttl_s = to_seconds(ttl, "ttl")
            stale_s = ttl_s if stale_time is None else to_seconds(stale_time, "stale_time")

        if math.isnan(ttl_s) or ttl_s <= 0:
            raise InvalidCacheOptionsError(f"ttl must be positive, got {ttl_s}", option="ttl", value=ttl_s)
        if math.isnan(stale_s) or stale_s < 0:
            raise InvalidCacheOptionsError(
                f"stale_time must not be negative, got {stale_s}", option="stale_time", value=stale_s
            )
        if stale_s > ttl_s:
            raise InvalidCacheOptionsError(
                f"stale_time ({stale_s}) must not exceed ttl ({ttl_s})",
                option="stale_time",
                value=stale_s,
                detail={"ttl": ttl_s},
            )
        return ttl_s, stale_s

    @staticmethod
    def _matcher(prefix: str | None, tag: str | None) -> InvalidationMatcher:
        if tag is not None:
            return lambda _key, tags: tag in tags
        if prefix is None:
            return lambda _key, _tags: True
        return lambda key, _tags: key.startswith(prefix)

    @staticmethod
    def _normalise_tags(tags: Iterable[str]) -> frozenset[str]:
        if isinstance(tags, str):
            return frozenset((tags,))
        normalised = frozenset(tags)
        for tag in normalised:
            if not isinstance(tag, str):
                raise InvalidCacheOptionsError("tags must be strings", option="tags", value=tag)
        return normalised

    def _enforce_capacity(self) -> None:
        max_size = self._settings.max_size
        if not max_size or len(self._entries) <= max_size:
            return
        # expired entries go first, they are already logically gone
        now = self._clock.monotonic()
        self._purge([k for k, e in self._entries.items() if e.is_expired(now)], _EXPIRED)
        overflow = len(self._entries) - max_size
        if overflow > 0:
            self._purge(list(islice(self._entries, overflow)), _CAPACITY)

    def _purge(self, keys: Iterable[str], reason: str) -> int:
        """Remove *keys*, then hand each removed entry to ``on_evict``."""
        removed = [(key, self._entries.pop(key)) for key in keys]
        for key, _ in removed:
            if reason != _INVALIDATED:
                self._evictions += 1
                self._log.debug("cache.evicted", key=key, reason=reason)
            self._eviction_counter.add(1, {**self._labels, "reason": reason})
        if removed:
            self._size_gauge.set(len(self._entries), self._labels)
        if self._on_evict is not None:
            for key, entry in removed:
                try:
                    self._on_evict(key, entry.value)
                except Exception as exc:  # noqa: BLE001
                    self._log.warning(
                        "cache.evict_callback_failed", key=key, reason=reason, error=repr(exc)
                    )
        return len(removed)

    def _announce(self, matches: InvalidationMatcher) -> None:
        for listener in list(self._listeners):
            listener(matches)

    def _record_miss(self) -> None:
        self._misses += 1
        self._miss_counter.add(1, self._labels)
