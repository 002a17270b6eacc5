"""Unit tests – HttpxActionTrigger (respx-mocked transport)."""
from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest
import respx

from pulse_harness.adapters.http import HttpxActionTrigger
from pulse_harness.config import ApiSettings
from pulse_harness.kernel.errors import ExternalServiceError, InfrastructureTimeoutError
from pulse_harness.kernel.ports import ActionResponse

BASE = "http://api.test"


def _invoke(trigger: HttpxActionTrigger, *args: Any, **kwargs: Any) -> ActionResponse:
    async def run() -> ActionResponse:
        async with trigger:
            return await trigger.invoke(*args, **kwargs)

    return asyncio.run(run())


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class TestHttpxActionTriggerResponses:
    def test_json_body_is_parsed(self) -> None:
        with respx.mock(base_url=BASE) as router:
            router.get("/api/v1/orders/o-1").respond(200, json={"orderId": "o-1", "status": "PENDING"})
            response = _invoke(HttpxActionTrigger(BASE), "GET", "/api/v1/orders/o-1")
        assert response.status_code == 200
        assert response.body == {"orderId": "o-1", "status": "PENDING"}
        assert response.headers["content-type"] == "application/json"

    def test_client_error_status_is_returned_not_raised(self) -> None:
        with respx.mock(base_url=BASE) as router:
            router.post("/api/v1/orders").respond(400, json={"error": "customerId is required"})
            response = _invoke(HttpxActionTrigger(BASE), "POST", "/api/v1/orders", body={})
        assert response.status_code == 400
        assert response.body == {"error": "customerId is required"}

    def test_text_body_when_not_json(self) -> None:
        with respx.mock(base_url=BASE) as router:
            router.get("/health").respond(200, text="ok")
            response = _invoke(HttpxActionTrigger(BASE), "GET", "/health")
        assert response.body == "ok"

    def test_malformed_json_falls_back_to_text(self) -> None:
        with respx.mock(base_url=BASE) as router:
            router.get("/broken").respond(200, content=b"{not json", headers={"content-type": "application/json"})
            response = _invoke(HttpxActionTrigger(BASE), "GET", "/broken")
        assert response.body == "{not json"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestHttpxActionTriggerRequests:
    def test_mapping_body_sent_as_json(self) -> None:
        with respx.mock(base_url=BASE) as router:
            route = router.post("/api/v1/orders").respond(201, json={"orderId": "o-1"})
            _invoke(
                HttpxActionTrigger(BASE),
                "POST",
                "/api/v1/orders",
                body={"customerId": "c-1"},
                headers={"x-request-id": "r-1"},
            )
        request = route.calls.last.request
        assert json.loads(request.content) == {"customerId": "c-1"}
        assert request.headers["x-request-id"] == "r-1"

    def test_bytes_body_sent_verbatim(self) -> None:
        with respx.mock(base_url=BASE) as router:
            route = router.put("/api/v1/blob").respond(204)
            _invoke(HttpxActionTrigger(BASE), "PUT", "/api/v1/blob", body=b"\x00\x01")
        assert route.calls.last.request.content == b"\x00\x01"

    def test_query_params(self) -> None:
        with respx.mock(base_url=BASE) as router:
            route = router.get("/api/v1/orders").respond(200, json=[])
            _invoke(HttpxActionTrigger(BASE), "GET", "/api/v1/orders", params={"status": "PAID"})
        assert route.calls.last.request.url.params["status"] == "PAID"

    def test_invoke_connects_lazily(self) -> None:
        trigger = HttpxActionTrigger(BASE)

        async def run() -> ActionResponse:
            try:
                return await trigger.invoke("GET", "/health")
            finally:
                await trigger.disconnect()

        with respx.mock(base_url=BASE) as router:
            router.get("/health").respond(200, text="ok")
            assert asyncio.run(run()).status_code == 200
        assert trigger._client is None

    def test_from_settings(self) -> None:
        trigger = HttpxActionTrigger.from_settings(ApiSettings(base_url=BASE, timeout=5.0))
        with respx.mock(base_url=BASE) as router:
            router.get("/health").respond(200, text="ok")
            assert _invoke(trigger, "GET", "/health").status_code == 200


# ---------------------------------------------------------------------------
# Transport failures
# ---------------------------------------------------------------------------


class TestHttpxActionTriggerFailures:
    def test_timeout_raises_infrastructure_timeout(self) -> None:
        with respx.mock(base_url=BASE) as router:
            router.get("/slow").mock(side_effect=httpx.ReadTimeout("timed out"))
            with pytest.raises(InfrastructureTimeoutError):
                _invoke(HttpxActionTrigger(BASE), "GET", "/slow")

    def test_connect_error_raises_external_service_error(self) -> None:
        with respx.mock(base_url=BASE) as router:
            router.get("/down").mock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(ExternalServiceError) as exc_info:
                _invoke(HttpxActionTrigger(BASE), "GET", "/down")
        assert exc_info.value.service == BASE
