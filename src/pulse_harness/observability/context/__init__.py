"""Observability – scenario context propagation."""
from pulse_harness.observability.context.scenario import ScenarioContext, ScenarioInfo

__all__ = ["ScenarioContext", "ScenarioInfo"]
