"""Order validation: malformed orders are rejected and never announced."""
from __future__ import annotations

import asyncio
import re

import pytest

from pulse_harness.correlation import field_equals
from pulse_harness.testing import expect_no_event

pytestmark = pytest.mark.e2e

ORDER_EVENTS = "order-events"

REJECTIONS = [
    pytest.param({"schemeCode": "INVALID@123"}, [r"scheme code", r"invalid|format"], id="scheme-code-format"),
    pytest.param({"schemeCode": ""}, [r"scheme code.*required"], id="scheme-code-empty"),
    pytest.param({"schemeCode": None}, [r"scheme code.*required"], id="scheme-code-null"),
    pytest.param({"orderType": "INVALID_TYPE"}, [r"order type", r"invalid|unsupported"], id="order-type-invalid"),
    pytest.param({"orderType": None}, [r"order type.*required"], id="order-type-null"),
    pytest.param({"orderType": ""}, [r"order type.*required"], id="order-type-empty"),
]


class TestOrderValidation:
    @pytest.mark.parametrize(("overrides", "patterns"), REJECTIONS)
    def test_invalid_order_rejected(self, live_scenario, order_payload, overrides, patterns) -> None:
        order = order_payload(**overrides)

        async def run() -> None:
            async with live_scenario() as sc:
                announced = await sc.expect(
                    ORDER_EVENTS,
                    field_equals(investorId=order["investorId"], eventType="ORDER_CREATED"),
                    timeout=2,
                )
                response = await sc.trigger.post("/api/v1/orders", order)
                assert response.status_code == 400
                error = response.json_field("error")
                assert error
                for pattern in patterns:
                    assert re.search(pattern, error, re.IGNORECASE), error
                expect_no_event(await announced)
                assert await sc.store.count("orders", {"investorId": order["investorId"]}) == 0

        asyncio.run(run())
