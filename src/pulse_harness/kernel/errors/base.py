"""Kernel errors – BaseError.

A harness failure ends up in two places: the test report and the JSON log.
Both need to know which scenario was running and which collaborator (topic,
collection, URL, remote path) was involved, so every error carries them.
"""

from __future__ import annotations

import json
from typing import Any

from pulse_harness.kernel.context import current_scenario


class BaseError(Exception):
    """Root of the harness error hierarchy.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to ``default_code``).
        detail: Extra context, serialisable.
        cause: Original exception that triggered this error.
        target: The collaborator involved, e.g. a topic or a URL.

    The id of the scenario active at construction time is kept as
    ``scenario_id``.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
        target: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.target = target
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause
        scenario = current_scenario()
        self.scenario_id: str | None = scenario.scenario_id if scenario is not None else None

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.target is not None:
            payload["target"] = self.target
        if self.scenario_id is not None:
            payload["scenario_id"] = self.scenario_id
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


__all__ = ["BaseError"]
