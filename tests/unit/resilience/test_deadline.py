"""Unit tests for Deadline."""
from __future__ import annotations

from pulse_harness.resilience.timeouts import Deadline
from pulse_harness.testing.fakes import FakeClock


class TestDeadline:
    def test_after_sets_window(self) -> None:
        clock = FakeClock()
        deadline = Deadline.after(5.0, clock)
        assert deadline.timeout_seconds == 5.0
        assert deadline.remaining_seconds == 5.0
        assert deadline.elapsed_seconds == 0.0
        assert not deadline.is_expired

    def test_progresses_with_clock(self) -> None:
        clock = FakeClock()
        deadline = Deadline.after(5.0, clock)
        clock.advance(seconds=2)
        assert deadline.remaining_seconds == 3.0
        assert deadline.elapsed_seconds == 2.0

    def test_expired_remaining_is_zero(self) -> None:
        clock = FakeClock()
        deadline = Deadline.after(1.0, clock)
        clock.advance(seconds=3)
        assert deadline.is_expired
        assert deadline.remaining_seconds == 0.0
        assert deadline.elapsed_seconds == 3.0

    def test_system_clock_by_default(self) -> None:
        deadline = Deadline.after(60)
        assert 59 < deadline.remaining_seconds <= 60

    def test_equality_ignores_clock(self) -> None:
        assert Deadline(1.0, 2.0, FakeClock()) == Deadline(1.0, 2.0)
