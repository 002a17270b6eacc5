"""Observability – structured logging and scenario context."""
from pulse_harness.observability.context import ScenarioContext, ScenarioInfo
from pulse_harness.observability.logging import JsonLoggerFactory, get_logger

__all__ = ["JsonLoggerFactory", "ScenarioContext", "ScenarioInfo", "get_logger"]
