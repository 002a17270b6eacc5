"""Resilience – bounded retry for transport failures."""
from pulse_harness.resilience.retry.tenacity_adapter import TenacityRetryPolicy

__all__ = ["TenacityRetryPolicy"]
