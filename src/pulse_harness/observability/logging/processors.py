"""Observability – structlog processors and get_logger helper.

ScenarioContextProcessor: injects scenario_id/scenario name into log events.
get_logger(name): returns a bound structlog logger.
"""
from __future__ import annotations

from typing import Any

import structlog

from pulse_harness.observability.context import ScenarioContext


class ScenarioContextProcessor:
    """structlog processor that injects context from :class:`ScenarioContext`.

    Injects the following fields when a :class:`ScenarioInfo` is active:

    * ``scenario_id``
    * ``scenario`` (only when the scenario has a name)
    * ``environment`` (only when not ``None``)
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        info = ScenarioContext.get()
        if info is not None:
            event_dict.setdefault("scenario_id", info.scenario_id)
            if info.name:
                event_dict.setdefault("scenario", info.name)
            if info.environment is not None:
                event_dict.setdefault("environment", info.environment)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["ScenarioContextProcessor", "get_logger"]
