"""Application cache – CacheLoader (read-through with stale-while-revalidate).

The calling layer around :class:`CacheStore`: it decides between serving a
hit, serving a stale hit while refreshing in the background, and blocking
on a fetch.  Unlike the store it knows about in-flight work, and keeps at
most one fetch per key running at a time.  A fetch whose key is invalidated
while it runs still answers its callers, but its result is not written to
the store.
"""
from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Awaitable, Callable, Iterable
from datetime import timedelta
from typing import Generic, TypeVar

from storefront_cache.application.cache.store import CacheStore, InvalidationMatcher
from storefront_cache.observability.logging import get_logger

__all__ = ["CacheLoader", "Fetcher", "LoadResult"]

T = TypeVar("T")

Fetcher = Callable[[], Awaitable[T]]


@dataclasses.dataclass(frozen=True, slots=True)
class LoadResult(Generic[T]):
    value: T
    from_cache: bool
    was_stale: bool = False


@dataclasses.dataclass(frozen=True, slots=True)
class _EntryOptions:
    ttl: float | timedelta | None
    stale_time: float | timedelta | None
    tags: tuple[str, ...]


class CacheLoader(Generic[T]):
    """Read-through loader with per-key fetch deduplication.

    Usage::

        store: CacheStore[list[Product]] = CacheStore(settings)
        loader = CacheLoader(store)

        result = await loader.get_or_load(
            CacheKey.build("products", "category", "rings"),
            lambda: api.list_products(category="rings"),
            ttl=CacheTTL.MEDIUM,
            stale_time=CacheTTL.SHORT,
            tags=[CacheTags.PRODUCTS],
        )
    """

    def __init__(self, store: CacheStore[T]) -> None:
        self._store = store
        self._in_flight: dict[str, asyncio.Task[T]] = {}
        self._pending_tags: dict[str, frozenset[str]] = {}
        # invalidated mid-fetch: awaited by drain(), never stored
        self._detached: set[asyncio.Task[T]] = set()
        self._log = get_logger(__name__, cache=store.name)
        store.add_invalidation_listener(self._on_invalidated)

    @property
    def store(self) -> CacheStore[T]:
        return self._store

    async def get_or_load(
        self,
        key: str,
        fetcher: Fetcher[T],
        *,
        ttl: float | timedelta | None = None,
        stale_time: float | timedelta | None = None,
        tags: Iterable[str] = (),
        force_refresh: bool = False,
    ) -> LoadResult[T]:
        options = _EntryOptions(ttl, stale_time, tuple([tags] if isinstance(tags, str) else tags))

        if not force_refresh:
            cached = self._store.get(key)
            if cached is not None:
                if cached.is_stale:
                    self._refresh_in_background(key, fetcher, options)
                return LoadResult(cached.value, from_cache=True, was_stale=cached.is_stale)

        task = self._in_flight.get(key)
        if task is None:
            task = self._start_fetch(key, fetcher, options)
        # shield: one cancelled caller must not cancel the fetch for the others
        value = await asyncio.shield(task)
        return LoadResult(value, from_cache=False)

    def in_flight(self, key: str) -> bool:
        return key in self._in_flight

    async def drain(self) -> None:
        """Wait for every pending fetch, ignoring their failures."""
        while self._in_flight or self._detached:
            await asyncio.gather(*self._in_flight.values(), *self._detached, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel pending fetches."""
        tasks = [*self._in_flight.values(), *self._detached]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._in_flight.clear()
        self._pending_tags.clear()
        self._detached.clear()

    # ------------------------------------------------------------------

    def _start_fetch(self, key: str, fetcher: Fetcher[T], options: _EntryOptions) -> asyncio.Task[T]:
        async def run() -> T:
            try:
                value = await fetcher()
                if task in self._detached:
                    self._log.debug("cache.fetch_discarded", key=key)
                else:
                    self._store.set(
                        key, value, ttl=options.ttl, stale_time=options.stale_time, tags=options.tags
                    )
                return value
            finally:
                self._detached.discard(task)
                if self._in_flight.get(key) is task:
                    del self._in_flight[key]
                    del self._pending_tags[key]

        task = asyncio.ensure_future(run())
        self._in_flight[key] = task
        self._pending_tags[key] = frozenset(options.tags)
        return task

    def _on_invalidated(self, matches: InvalidationMatcher) -> None:
        for key in [k for k, tags in self._pending_tags.items() if matches(k, tags)]:
            self._detached.add(self._in_flight.pop(key))
            del self._pending_tags[key]

    def _refresh_in_background(self, key: str, fetcher: Fetcher[T], options: _EntryOptions) -> None:
        if key in self._in_flight:
            return
        task = self._start_fetch(key, fetcher, options)
        task.add_done_callback(self._on_refresh_done(key))

    def _on_refresh_done(self, key: str) -> Callable[[asyncio.Task[T]], None]:
        def callback(task: asyncio.Task[T]) -> None:
            if task.cancelled():
                return
            exc = task.exception()
            if exc is not None:
                # the stale entry stays in place until it expires
                self._log.warning("cache.refresh_failed", key=key, error=repr(exc))

        return callback
