"""Testing fakes – in-memory doubles for kernel ports."""
from pulse_harness.testing.fakes.broker import InMemoryBroker
from pulse_harness.testing.fakes.clock import FakeClock
from pulse_harness.testing.fakes.store import InMemoryStateStore
from pulse_harness.testing.fakes.trigger import FakeActionTrigger, RecordedRequest
from pulse_harness.kernel.time import FrozenClock

__all__ = [
    "FakeActionTrigger",
    "FakeClock",
    "FrozenClock",
    "InMemoryBroker",
    "InMemoryStateStore",
    "RecordedRequest",
]
