"""Resilience – deadlines."""
from pulse_harness.resilience.timeouts.deadline import Deadline

__all__ = ["Deadline"]
