"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


def add_cache_key_prefix(
    logger: Any,        # noqa: ARG001
    method_name: str,   # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor: add ``namespace`` derived from ``key``.

    Keys are ``namespace:part:...``; surfacing the namespace as its own
    field makes cache log lines groupable without parsing keys downstream.
    """
    key = event_dict.get("key")
    if isinstance(key, str) and "namespace" not in event_dict:
        event_dict["namespace"] = key.split(":", 1)[0]
    return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["add_cache_key_prefix", "get_logger"]
