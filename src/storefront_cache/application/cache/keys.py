"""Application cache – CacheKey builder."""
from __future__ import annotations

import hashlib
import json
import math
from typing import Any

from storefront_cache.kernel.errors import KeySerializationError

__all__ = ["SEPARATOR", "CacheKey"]

SEPARATOR = ":"

_SCALARS = (bool, int, float, type(None))
_CONTAINERS = (dict, list, tuple)


def _escape(text: str) -> str:
    # '%' first, otherwise the escapes themselves would be re-escaped
    return text.replace("%", "%25").replace(SEPARATOR, "%3A")


def _canonical_json(value: Any) -> str:
    try:
        return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise KeySerializationError(
            f"Cache key part {value!r} is not JSON-serializable", part=value, cause=exc
        ) from exc


def _render(part: Any) -> str:
    if isinstance(part, str):
        return _escape(part)
    if isinstance(part, float) and not math.isfinite(part):
        raise KeySerializationError(f"Cache key part {part!r} is not a finite number", part=part)
    if isinstance(part, _SCALARS):
        return _canonical_json(part)
    if isinstance(part, _CONTAINERS):
        return _escape(_canonical_json(part))
    raise KeySerializationError(
        f"Unsupported cache key part of type {type(part).__name__}", part=part
    )


class CacheKey:
    """Factory for deterministic cache key strings.

    Keys have the shape ``namespace:part:part``.  Two callers asking for the
    same namespace and parts get the same key, so they share one entry, and
    every key in a namespace can be dropped with a single prefix
    invalidation.  Separators inside string parts are percent-escaped, so
    ``build("p", "a:b")`` and ``build("p", "a", "b")`` never collide.
    """

    @staticmethod
    def build(namespace: str, *parts: Any) -> str:
        if not isinstance(namespace, str) or not namespace:
            raise KeySerializationError("Cache key namespace must be a non-empty string", part=namespace)
        rendered = [_escape(namespace), *(_render(p) for p in parts)]
        return SEPARATOR.join(rendered)

    @staticmethod
    def for_resource(resource_type: str, resource_id: str | int) -> str:
        return CacheKey.build(resource_type, resource_id)

    @staticmethod
    def for_query(namespace: str, **params: Any) -> str:
        # deterministic: sorted keys, compact JSON, SHA-256 first 16 hex chars
        digest = hashlib.sha256(_canonical_json(params).encode()).hexdigest()[:16]
        return CacheKey.build(namespace, "query", digest)

    @staticmethod
    def namespace_of(key: str) -> str:
        """Return the (escaped) namespace segment of *key*."""
        return key.split(SEPARATOR, 1)[0]
