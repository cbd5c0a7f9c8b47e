"""Unit tests for application cache – @cached, CacheWarmupService, presets."""
from __future__ import annotations

import asyncio
from datetime import datetime

import pytest
from structlog.testing import capture_logs

from storefront_cache.application.cache import (
    CacheKey,
    CacheStore,
    CacheTags,
    CacheTTL,
    CacheWarmupService,
    cached,
    invalidate_product_cache,
    invalidate_user_cache,
    user_tag,
)
from storefront_cache.kernel.errors import KeySerializationError


# ---------------------------------------------------------------------------
# @cached decorator
# ---------------------------------------------------------------------------


class TestCachedDecorator:
    def test_result_cached_second_call(self, cache_store: CacheStore) -> None:
        calls: list[str] = []

        @cached(cache_store, ttl=60, namespace="products")
        async def list_products(category: str) -> list[str]:
            calls.append(category)
            return [f"{category}-1"]

        assert asyncio.run(list_products("rings")) == ["rings-1"]
        assert asyncio.run(list_products("rings")) == ["rings-1"]
        assert calls == ["rings"]

    def test_different_args_not_shared(self, cache_store: CacheStore) -> None:
        calls: list[int] = []

        @cached(cache_store, ttl=60)
        async def compute(x: int) -> int:
            calls.append(x)
            return x * 2

        asyncio.run(compute(1))
        asyncio.run(compute(2))
        assert calls == [1, 2]

    def test_default_key_shape(self, cache_store: CacheStore) -> None:
        @cached(cache_store, ttl=60, namespace="products")
        async def list_products(*args: object, **kwargs: object) -> None:
            return None

        assert list_products.cache_key("rings") == CacheKey.build("products", "rings")
        assert list_products.cache_key(category="rings") == CacheKey.build("products", ["category", "rings"])

    def test_namespace_defaults_to_qualname(self, cache_store: CacheStore) -> None:
        @cached(cache_store, ttl=60)
        async def featured() -> list[int]:
            return [1]

        asyncio.run(featured())
        assert cache_store.has(CacheKey.build(featured.__qualname__))

    def test_key_fn(self, cache_store: CacheStore) -> None:
        @cached(cache_store, ttl=60, key_fn=lambda pid: f"product:{pid}")
        async def get_product(pid: int) -> dict[str, int]:
            return {"id": pid}

        asyncio.run(get_product(7))
        assert cache_store.has("product:7")

    def test_tags_applied(self, cache_store: CacheStore) -> None:
        @cached(cache_store, ttl=60, tags=[CacheTags.ORDERS])
        async def list_orders(user_id: str) -> list[str]:
            return []

        asyncio.run(list_orders("u1"))
        assert cache_store.invalidate(tag=CacheTags.ORDERS) == 1

    def test_invalidate_clears_only_own_namespace(self, cache_store: CacheStore) -> None:
        @cached(cache_store, ttl=60, namespace="products")
        async def list_products(*args: str) -> list[str]:
            return list(args)

        cache_store.set("productsfeed", "other", ttl=60)
        asyncio.run(list_products())
        asyncio.run(list_products("rings"))
        asyncio.run(list_products("mugs"))

        assert list_products.invalidate() == 3
        assert cache_store.has("productsfeed")

    def test_method_cached_through_key_fn(self, cache_store: CacheStore) -> None:
        calls: list[int] = []

        class Catalog:
            @cached(cache_store, ttl=60, key_fn=lambda self, pid: CacheKey.for_resource("product", pid))
            async def get_product(self, pid: int) -> dict[str, int]:
                calls.append(pid)
                return {"id": pid}

        catalog = Catalog()
        assert asyncio.run(catalog.get_product(7)) == {"id": 7}
        assert asyncio.run(Catalog().get_product(7)) == {"id": 7}
        assert calls == [7]
        assert cache_store.has("product:7")

    def test_method_without_key_fn_points_at_key_fn(self, cache_store: CacheStore) -> None:
        class Catalog:
            @cached(cache_store, ttl=60)
            async def featured(self) -> list[int]:
                return []

        with pytest.raises(KeySerializationError, match="key_fn") as exc_info:
            asyncio.run(Catalog().featured())
        assert exc_info.value.detail["part_type"] == "Catalog"

    def test_unserialisable_argument_points_at_key_fn(self, cache_store: CacheStore) -> None:
        @cached(cache_store, ttl=60, namespace="orders")
        async def orders_since(since: datetime) -> list[str]:
            return []

        with pytest.raises(KeySerializationError, match="key_fn"):
            asyncio.run(orders_since(datetime(2026, 1, 1)))
        assert orders_since.cache_key(since="2026-01-01") == CacheKey.build("orders", ["since", "2026-01-01"])


# ---------------------------------------------------------------------------
# CacheWarmupService
# ---------------------------------------------------------------------------


class TestCacheWarmupService:
    def test_warm_loads_and_stores(self, cache_store: CacheStore) -> None:
        warmer = CacheWarmupService(cache_store)

        async def top_products() -> list[str]:
            return ["p1", "p2"]

        warmer.register("products:top", top_products, ttl=CacheTTL.LONG, tags=[CacheTags.PRODUCTS])
        assert asyncio.run(warmer.warm("products:top")) == ["p1", "p2"]
        assert cache_store.has("products:top")
        assert invalidate_product_cache(cache_store) == 1

    def test_warm_unknown_key_raises(self, cache_store: CacheStore) -> None:
        with pytest.raises(KeyError):
            asyncio.run(CacheWarmupService(cache_store).warm("nope"))

    def test_warm_all_collects_failures(self, cache_store: CacheStore) -> None:
        warmer = CacheWarmupService(cache_store)

        async def ok() -> str:
            return "ok"

        async def boom() -> str:
            raise RuntimeError("backend down")

        warmer.register("blog:latest", ok, ttl=60)
        warmer.register("products:top", boom, ttl=60)

        with capture_logs() as logs:
            failures = asyncio.run(warmer.warm_all())

        assert list(failures) == ["products:top"]
        assert isinstance(failures["products:top"], RuntimeError)
        assert cache_store.has("blog:latest")
        assert [e["key"] for e in logs if e["event"] == "cache.warmup_failed"] == ["products:top"]
        assert warmer.registered_keys == ["blog:latest", "products:top"]


# ---------------------------------------------------------------------------
# presets
# ---------------------------------------------------------------------------


class TestPresets:
    def test_ttl_values(self) -> None:
        assert (CacheTTL.SHORT, CacheTTL.MEDIUM, CacheTTL.LONG, CacheTTL.HOUR) == (120, 600, 1800, 3600)

    def test_user_tag(self) -> None:
        assert user_tag(42) == "user:42"

    def test_invalidate_user_cache_by_id(self, cache_store: CacheStore) -> None:
        cache_store.set("profile:u1", "a", ttl=60, tags=[CacheTags.PROFILE, user_tag("u1")])
        cache_store.set("orders:u1", "b", ttl=60, tags=[CacheTags.ORDERS, user_tag("u1")])
        cache_store.set("profile:u2", "c", ttl=60, tags=[CacheTags.PROFILE, user_tag("u2")])
        assert invalidate_user_cache(cache_store, "u1") == 2
        assert cache_store.has("profile:u2")

    def test_invalidate_user_cache_all(self, cache_store: CacheStore) -> None:
        cache_store.set("profile:u1", "a", ttl=60, tags=[CacheTags.PROFILE])
        cache_store.set("orders:u1", "b", ttl=60, tags=[CacheTags.ORDERS])
        cache_store.set("cart:u1", "c", ttl=60, tags=[CacheTags.CART])
        assert invalidate_user_cache(cache_store) == 2
        assert cache_store.has("cart:u1")
