"""Application cache – @cached decorator and CacheWarmupService."""
from __future__ import annotations

import dataclasses
import functools
from collections.abc import Awaitable, Callable, Iterable
from datetime import timedelta
from typing import Any, TypeVar

from storefront_cache.application.cache.keys import SEPARATOR, CacheKey
from storefront_cache.application.cache.loader import CacheLoader
from storefront_cache.application.cache.store import CacheStore
from storefront_cache.kernel.errors import KeySerializationError
from storefront_cache.observability.logging import get_logger

__all__ = ["CacheWarmupService", "cached"]

T = TypeVar("T")

_log = get_logger(__name__)


def cached(
    store: CacheStore[Any],
    *,
    ttl: float | timedelta | None = None,
    stale_time: float | timedelta | None = None,
    tags: Iterable[str] = (),
    key_fn: Callable[..., str] | None = None,
    namespace: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator: serve an async function's result through *store*.

    The key is ``key_fn(*args, **kwargs)`` when given, otherwise
    ``CacheKey.build(namespace, *args, *sorted(kwargs.items()))`` with
    *namespace* defaulting to the function's qualified name.  Stale results
    are returned immediately and refreshed in the background.

    The default key only takes arguments :meth:`CacheKey.build` accepts
    (strings, numbers, booleans, ``None``, and lists or dicts of those).
    Methods (``self``/``cls``) and arguments such as ``datetime`` or
    ``UUID`` need a *key_fn*::

        @cached(store, ttl=60, key_fn=lambda self, pid: f"product:{pid}")
        async def get_product(self, pid: UUID) -> Product: ...

    The wrapper exposes ``loader`` and ``invalidate()``, which drops every
    entry in the function's namespace.
    """
    tag_list = tuple([tags] if isinstance(tags, str) else tags)

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        loader: CacheLoader[Any] = CacheLoader(store)
        ns = namespace or fn.__qualname__

        def make_key(*args: Any, **kwargs: Any) -> str:
            if key_fn is not None:
                return key_fn(*args, **kwargs)
            try:
                return CacheKey.build(ns, *args, *(list(item) for item in sorted(kwargs.items())))
            except KeySerializationError as exc:
                raise KeySerializationError(
                    f"Cannot build a cache key for {ns}(): {exc.message}; pass key_fn to @cached",
                    part=exc.part,
                    cause=exc,
                ) from exc

        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            result = await loader.get_or_load(
                make_key(*args, **kwargs),
                lambda: fn(*args, **kwargs),
                ttl=ttl,
                stale_time=stale_time,
                tags=tag_list,
            )
            return result.value

        def invalidate() -> int:
            # a call without arguments is keyed by the bare namespace
            base = CacheKey.build(ns)
            return int(store.delete(base)) + store.invalidate(base + SEPARATOR)

        wrapper.loader = loader  # type: ignore[attr-defined]
        wrapper.invalidate = invalidate  # type: ignore[attr-defined]
        wrapper.cache_key = make_key  # type: ignore[attr-defined]
        return wrapper

    return decorator


@dataclasses.dataclass(frozen=True)
class _Registration:
    loader: Callable[[], Awaitable[Any]]
    ttl: float | timedelta | None
    stale_time: float | timedelta | None
    tags: tuple[str, ...]


class CacheWarmupService:
    """Pre-populates cache entries, e.g. the catalog on startup."""

    def __init__(self, store: CacheStore[Any]) -> None:
        self._store = store
        self._loaders: dict[str, _Registration] = {}

    def register(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        *,
        ttl: float | timedelta | None = None,
        stale_time: float | timedelta | None = None,
        tags: Iterable[str] = (),
    ) -> None:
        self._loaders[key] = _Registration(
            loader, ttl, stale_time, tuple([tags] if isinstance(tags, str) else tags)
        )

    @property
    def registered_keys(self) -> list[str]:
        return list(self._loaders)

    async def warm(self, key: str) -> Any:
        if key not in self._loaders:
            raise KeyError(f"No loader registered for key: {key!r}")
        reg = self._loaders[key]
        value = await reg.loader()
        self._store.set(key, value, ttl=reg.ttl, stale_time=reg.stale_time, tags=reg.tags)
        return value

    async def warm_all(self) -> dict[str, Exception]:
        """Warm every registered key; failures are logged and returned, not raised."""
        failures: dict[str, Exception] = {}
        for key in self._loaders:
            try:
                await self.warm(key)
            except Exception as exc:  # noqa: BLE001
                _log.warning("cache.warmup_failed", key=key, error=repr(exc))
                failures[key] = exc
        return failures
