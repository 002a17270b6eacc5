"""Fixtures for the order-management scenario suites."""
from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any

import pytest


@pytest.fixture
def order_payload() -> Callable[..., dict[str, Any]]:
    """Factory for a valid PURCHASE order; investor and idempotency key are unique per call."""

    def build(**overrides: Any) -> dict[str, Any]:
        run_id = uuid.uuid4().hex[:12]
        order = {
            "investorId": f"inv-{run_id}",
            "schemeCode": "INF200K01RJ1",
            "orderType": "PURCHASE",
            "amount": 10000.0,
            "holdingType": "SINGLE",
            "transactionMode": "PHYSICAL",
            "euin": "E123456789",
            "remarks": "Automated scenario order",
            "sourceSystem": "MOBILE_APP",
            "idempotencyKey": f"ord-{run_id}",
        }
        order.update(overrides)
        return order

    return build
