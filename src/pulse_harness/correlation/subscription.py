"""Correlation – Subscription and its lifecycle states."""
from __future__ import annotations

import dataclasses
import enum
from uuid import uuid4

from pulse_harness.correlation.predicate import Predicate
from pulse_harness.kernel.messaging import Origin
from pulse_harness.resilience.timeouts import Deadline


class MatchMode(enum.StrEnum):
    SINGLE = "single"
    MANY = "many"


class SubscriptionState(enum.StrEnum):
    """``IDLE -> ARMED -> {MATCHED | TIMED_OUT | ERRORED | CANCELLED}``."""

    IDLE = "idle"
    ARMED = "armed"
    MATCHED = "matched"
    TIMED_OUT = "timed_out"
    ERRORED = "errored"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self not in (SubscriptionState.IDLE, SubscriptionState.ARMED)


def new_group_id(client_id: str, topic: str) -> str:
    """Return a consumer-group id unique to one subscription."""
    return f"{client_id}-{topic}-{uuid4().hex}"


@dataclasses.dataclass(frozen=True)
class Subscription:
    """One logical listen operation; never outlives a single wait."""

    topic: str
    predicate: Predicate
    deadline: Deadline
    group_id: str
    mode: MatchMode = MatchMode.SINGLE
    max_matches: int = 1
    origin: Origin = Origin.EARLIEST


__all__ = ["MatchMode", "Subscription", "SubscriptionState", "new_group_id"]
