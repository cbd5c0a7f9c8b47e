"""Observability – structured logging helpers."""
from storefront_cache.observability.logging.factory import JsonLoggerFactory
from storefront_cache.observability.logging.processors import add_cache_key_prefix, get_logger

__all__ = ["JsonLoggerFactory", "add_cache_key_prefix", "get_logger"]
