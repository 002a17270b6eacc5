"""Observability – ScenarioContext."""
from __future__ import annotations

from contextvars import Token

from pulse_harness.kernel.context import SCENARIO, ScenarioInfo


class ScenarioContext:
    """Ambient scenario context stored in a ``ContextVar``.

    Log processors and harness errors both read it.
    """

    @staticmethod
    def set(info: ScenarioInfo) -> Token[ScenarioInfo | None]:
        return SCENARIO.set(info)

    @staticmethod
    def get() -> ScenarioInfo | None:
        return SCENARIO.get()

    @staticmethod
    def reset(token: Token[ScenarioInfo | None]) -> None:
        SCENARIO.reset(token)

    @staticmethod
    def clear() -> None:
        SCENARIO.set(None)


__all__ = ["ScenarioContext", "ScenarioInfo"]
