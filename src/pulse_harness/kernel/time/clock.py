"""Kernel time – Clock protocol + implementations.

``monotonic()`` drives deadlines and must never go backwards; ``now()`` is
only used to stamp observations for humans.
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
    """Production clock: wall time from ``datetime.now(UTC)``, deadlines from ``time.monotonic``."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def monotonic(self) -> float:
        return time.monotonic()


class FrozenClock:
    """Test clock pinned to a fixed point in time."""

    def __init__(self, fixed: datetime, monotonic_start: float = 0.0) -> None:
        self._fixed = fixed
        self._mono = monotonic_start

    def now(self) -> datetime:
        return self._fixed

    def monotonic(self) -> float:
        return self._mono

    def advance(self, **kwargs: int | float) -> None:
        """Advance both readings by the given ``timedelta`` kwargs."""
        delta = timedelta(**kwargs)
        self._fixed += delta
        self._mono += delta.total_seconds()


def utc_now() -> datetime:
    """Shorthand for ``datetime.now(UTC)``."""
    return datetime.now(UTC)


__all__ = ["Clock", "FrozenClock", "SystemClock", "utc_now"]
