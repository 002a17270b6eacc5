"""Resilience – retry and deadline primitives."""
from pulse_harness.resilience.retry import TenacityRetryPolicy
from pulse_harness.resilience.timeouts import Deadline

__all__ = ["Deadline", "TenacityRetryPolicy"]
