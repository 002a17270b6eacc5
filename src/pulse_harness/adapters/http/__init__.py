"""HTTP adapter – httpx action trigger."""
from pulse_harness.adapters.http.client import HttpxActionTrigger

__all__ = ["HttpxActionTrigger"]
