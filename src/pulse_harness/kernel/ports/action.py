"""Kernel ports – Action Trigger (request/response relay)."""
from __future__ import annotations

import abc
import dataclasses
from collections.abc import Mapping
from typing import Any


@dataclasses.dataclass(frozen=True)
class ActionResponse:
    """Status, parsed body and headers of one triggered action."""

    status_code: int
    body: Any = None
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json_field(self, name: str, default: Any = None) -> Any:
        """Return ``body[name]`` when the body is a JSON object, else *default*."""
        if isinstance(self.body, Mapping):
            return self.body.get(name, default)
        return default


class ActionTrigger(abc.ABC):
    """Port: initiate backend work. Callers interpret status codes themselves."""

    @abc.abstractmethod
    async def invoke(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> ActionResponse: ...

    async def get(self, path: str, **kwargs: Any) -> ActionResponse:
        return await self.invoke("GET", path, **kwargs)

    async def post(self, path: str, body: Any = None, **kwargs: Any) -> ActionResponse:
        return await self.invoke("POST", path, body, **kwargs)

    async def put(self, path: str, body: Any = None, **kwargs: Any) -> ActionResponse:
        return await self.invoke("PUT", path, body, **kwargs)

    async def patch(self, path: str, body: Any = None, **kwargs: Any) -> ActionResponse:
        return await self.invoke("PATCH", path, body, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> ActionResponse:
        return await self.invoke("DELETE", path, **kwargs)


__all__ = ["ActionResponse", "ActionTrigger"]
