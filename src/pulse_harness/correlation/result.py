"""Correlation – MatchResult variants.

A subscription resolves to exactly one of :class:`Matched`,
:class:`MatchedMany`, :class:`TimedOut`, :class:`Errored` or
:class:`Cancelled`. ``TimedOut`` is an expected outcome, not an error.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import Any, ClassVar

from pulse_harness.correlation.subscription import SubscriptionState
from pulse_harness.kernel.errors import InfrastructureError
from pulse_harness.kernel.messaging import Event


class NoMatchError(AssertionError):
    """Raised by :meth:`MatchResult.unwrap` when nothing matched in time."""


class MatchResult(abc.ABC):
    """Terminal outcome of a subscription."""

    __slots__ = ()

    state: ClassVar[SubscriptionState]

    def is_matched(self) -> bool:
        return False

    def is_timed_out(self) -> bool:
        return False

    def is_error(self) -> bool:
        return False

    def is_cancelled(self) -> bool:
        return False

    @property
    def events(self) -> tuple[Event, ...]:
        return ()

    @property
    def event(self) -> Event | None:
        """First matching event, if any."""
        events = self.events
        return events[0] if events else None

    @abc.abstractmethod
    def unwrap(self) -> Any:
        """The matched event(s), or raise for an outcome without one."""


class Matched(MatchResult):
    """The first event satisfying the predicate."""

    __slots__ = ("_event",)

    state = SubscriptionState.MATCHED

    def __init__(self, event: Event) -> None:
        self._event = event

    def is_matched(self) -> bool:
        return True

    @property
    def events(self) -> tuple[Event, ...]:
        return (self._event,)

    @property
    def value(self) -> Any:
        return self._event.value

    def unwrap(self) -> Event:
        return self._event

    def __repr__(self) -> str:
        return f"Matched({self._event.topic}[{self._event.partition}]@{self._event.offset})"


class MatchedMany(MatchResult):
    """Up to ``max_matches`` events in arrival order; may be empty."""

    __slots__ = ("_events", "_max_matches")

    state = SubscriptionState.MATCHED

    def __init__(self, events: Sequence[Event], max_matches: int) -> None:
        self._events = tuple(events[:max_matches])
        self._max_matches = max_matches

    def is_matched(self) -> bool:
        return bool(self._events)

    @property
    def events(self) -> tuple[Event, ...]:
        return self._events

    @property
    def values(self) -> list[Any]:
        return [e.value for e in self._events]

    @property
    def max_matches(self) -> int:
        return self._max_matches

    @property
    def is_complete(self) -> bool:
        """``True`` when the cap was reached before the deadline."""
        return len(self._events) >= self._max_matches

    def unwrap(self) -> list[Event]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        return f"MatchedMany({len(self._events)}/{self._max_matches})"


class TimedOut(MatchResult):
    """The deadline elapsed with no match."""

    __slots__ = ("_topic", "_waited", "_observed")

    state = SubscriptionState.TIMED_OUT

    def __init__(self, topic: str, waited_seconds: float, observed: int = 0) -> None:
        self._topic = topic
        self._waited = waited_seconds
        self._observed = observed

    def is_timed_out(self) -> bool:
        return True

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def waited_seconds(self) -> float:
        return self._waited

    @property
    def observed(self) -> int:
        """How many candidate records were inspected before giving up."""
        return self._observed

    def unwrap(self) -> Any:
        raise NoMatchError(
            f"expected event on {self._topic!r}, got none after {self._waited:.2f}s "
            f"({self._observed} observed)"
        )

    def __repr__(self) -> str:
        return f"TimedOut({self._topic!r}, waited={self._waited:.3f}s, observed={self._observed})"


class Errored(MatchResult):
    """The verification mechanism itself failed."""

    __slots__ = ("_cause",)

    state = SubscriptionState.ERRORED

    def __init__(self, cause: InfrastructureError) -> None:
        self._cause = cause

    def is_error(self) -> bool:
        return True

    @property
    def cause(self) -> InfrastructureError:
        return self._cause

    def unwrap(self) -> Any:
        raise self._cause

    def __repr__(self) -> str:
        return f"Errored({self._cause!r})"


DecodeError = Errored


class Cancelled(MatchResult):
    """The owner cancelled the subscription before it resolved."""

    __slots__ = ("_topic",)

    state = SubscriptionState.CANCELLED

    def __init__(self, topic: str) -> None:
        self._topic = topic

    def is_cancelled(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise NoMatchError(f"subscription on {self._topic!r} was cancelled")

    def __repr__(self) -> str:
        return f"Cancelled({self._topic!r})"


__all__ = [
    "Cancelled",
    "DecodeError",
    "Errored",
    "MatchResult",
    "Matched",
    "MatchedMany",
    "NoMatchError",
    "TimedOut",
]
