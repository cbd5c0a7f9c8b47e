"""Root error class for storefront-cache.

Every error the cache raises is a caller mistake (bad entry options, a key
part with no stable rendering, a broken ``CACHE_*`` setting).  Each carries a
stable ``code`` and a ``detail`` dict so the failure can be logged as one
structured event.
"""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Base for :class:`CacheError` and :class:`ConfigError`.

    Args:
        message: Human-readable description.
        code: Slug such as ``invalid_cache_options``; subclasses set
            ``default_code``.
        detail: Offending option, value or setting.  Copied, so subclasses
            may ``setdefault`` into it.
        cause: Underlying exception, also chained as ``__cause__``.

    ``str(error)`` is the JSON form of :meth:`to_dict`, ready for a log line::

        {"code": "invalid_cache_options", "message": "...",
         "detail": {"option": "stale_time", "value": 20.0, "ttl": 10.0}}
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail) if detail else {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """``code``, ``message`` and ``detail``, plus ``cause`` as a repr when set."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


__all__ = ["BaseError"]
