"""Observability – structured logging helpers."""
from pulse_harness.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from pulse_harness.observability.logging.processors import ScenarioContextProcessor, get_logger
from pulse_harness.observability.logging.factory import JsonLoggerFactory

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "ScenarioContextProcessor",
    "SensitiveFieldsFilter",
    "get_logger",
]
