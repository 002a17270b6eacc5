"""Resilience – Deadline on the monotonic clock."""
from __future__ import annotations

import dataclasses

from pulse_harness.kernel.time import Clock, SystemClock


@dataclasses.dataclass(frozen=True)
class Deadline:
    """An absolute deadline derived from a timeout.

    Both instants are readings of ``clock.monotonic()``, so a wall-clock
    change while a test waits cannot stretch or shorten the wait.
    """

    started_at: float
    expires_at: float
    clock: Clock = dataclasses.field(default_factory=SystemClock, compare=False, repr=False)

    @classmethod
    def after(cls, seconds: float, clock: Clock | None = None) -> "Deadline":
        clock = clock or SystemClock()
        start = clock.monotonic()
        return cls(started_at=start, expires_at=start + seconds, clock=clock)

    @property
    def timeout_seconds(self) -> float:
        return self.expires_at - self.started_at

    @property
    def remaining_seconds(self) -> float:
        return max(0.0, self.expires_at - self.clock.monotonic())

    @property
    def elapsed_seconds(self) -> float:
        return self.clock.monotonic() - self.started_at

    @property
    def is_expired(self) -> bool:
        return self.clock.monotonic() >= self.expires_at


__all__ = ["Deadline"]
