"""Kernel – ScenarioInfo and the ambient scenario slot.

The slot lives in the kernel so that errors can record the scenario they
were raised in; :mod:`pulse_harness.observability.context` is the public
way to set it.
"""
from __future__ import annotations

import dataclasses
from contextvars import ContextVar
from uuid import uuid4


@dataclasses.dataclass(frozen=True)
class ScenarioInfo:
    """Ambient identity of the test scenario currently running."""
    scenario_id: str
    name: str = ""
    environment: str | None = None

    @classmethod
    def new(cls, name: str = "", environment: str | None = None) -> "ScenarioInfo":
        return cls(scenario_id=uuid4().hex[:12], name=name, environment=environment)


SCENARIO: ContextVar[ScenarioInfo | None] = ContextVar("_pulse_scenario_ctx", default=None)


def current_scenario() -> ScenarioInfo | None:
    return SCENARIO.get()


__all__ = ["SCENARIO", "ScenarioInfo", "current_scenario"]
