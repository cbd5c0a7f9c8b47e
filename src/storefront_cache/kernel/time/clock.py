"""Kernel time – Clock protocol + implementations.

Cache freshness is measured on a monotonic scale in seconds, so wall-clock
adjustments never make an entry younger or older than it is.
"""
from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: abstract clock for deterministic testing."""

    def now(self) -> datetime: ...
    def monotonic(self) -> float: ...


class SystemClock:
    """Production clock backed by :func:`time.monotonic`."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def monotonic(self) -> float:
        return time.monotonic()


class FrozenClock:
    """Test clock that only moves when told to."""

    def __init__(self, fixed: datetime | None = None, start: float = 0.0) -> None:
        self._fixed = fixed or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        self._ticks = float(start)

    def now(self) -> datetime:
        return self._fixed

    def monotonic(self) -> float:
        return self._ticks

    def advance(self, seconds: float | timedelta = 0.0, **kwargs: int | float) -> None:
        """Move time forward by *seconds* and/or ``timedelta`` kwargs."""
        delta = seconds.total_seconds() if isinstance(seconds, timedelta) else float(seconds)
        if kwargs:
            delta += timedelta(**kwargs).total_seconds()
        if delta < 0:
            raise ValueError("FrozenClock cannot move backwards")
        self._ticks += delta
        self._fixed += timedelta(seconds=delta)


def utc_now() -> datetime:
    """Shorthand for ``datetime.now(UTC)``."""
    return datetime.now(UTC)


__all__ = ["Clock", "FrozenClock", "SystemClock", "utc_now"]
