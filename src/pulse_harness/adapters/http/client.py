"""HTTP adapter – HttpxActionTrigger."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pulse_harness.config import ApiSettings
from pulse_harness.kernel.errors import ExternalServiceError, InfrastructureTimeoutError
from pulse_harness.kernel.ports import ActionResponse, ActionTrigger
from pulse_harness.observability.logging import get_logger

logger = get_logger(__name__)


def _require_httpx() -> Any:
    try:
        import httpx  # type: ignore[import-untyped]
        return httpx
    except ImportError as exc:
        raise ImportError("Install 'pulse-harness[http]' to use the HTTPX adapter") from exc


def _parse_body(response: Any) -> Any:
    """JSON when the server says so, otherwise text; unparsable JSON falls back to text."""
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("http.json_parse_failed", url=str(response.request.url), error=str(exc))
    return response.text


class HttpxActionTrigger(ActionTrigger):
    """Async httpx client that triggers backend actions.

    Status codes are returned, never raised: a 400 from a validation test is
    an expected outcome. Only transport failures raise.
    """

    def __init__(self, base_url: str = "", timeout: float = 30.0, **kwargs: Any) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._kwargs = kwargs
        self._client: Any = None

    @classmethod
    def from_settings(cls, settings: ApiSettings, **kwargs: Any) -> "HttpxActionTrigger":
        return cls(settings.base_url, settings.timeout, **kwargs)

    async def connect(self) -> None:
        if self._client is None:
            httpx = _require_httpx()
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout, **self._kwargs)

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxActionTrigger":
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()

    async def invoke(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> ActionResponse:
        await self.connect()
        httpx = _require_httpx()
        request_kwargs: dict[str, Any] = {"headers": dict(headers or {}), "params": dict(params or {})}
        if isinstance(body, bytes | str):
            request_kwargs["content"] = body
        elif body is not None:
            request_kwargs["json"] = body
        logger.info("http.request", method=method, path=path)
        try:
            response = await self._client.request(method, path, **request_kwargs)
        except httpx.TimeoutException as exc:
            logger.error("http.timeout", method=method, path=path)
            raise InfrastructureTimeoutError(f"HTTP request timed out: {method} {path}", cause=exc) from exc
        except httpx.HTTPError as exc:
            logger.error("http.failed", method=method, path=path, error=repr(exc))
            raise ExternalServiceError(service=self._base_url or path, message=str(exc), cause=exc) from exc
        logger.info("http.response", method=method, path=path, status=response.status_code)
        return ActionResponse(
            status_code=response.status_code,
            body=_parse_body(response),
            headers=dict(response.headers),
        )


__all__ = ["HttpxActionTrigger"]
