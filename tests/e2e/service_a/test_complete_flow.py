"""Service A: users API, a Kafka round trip, MongoDB access, the order lifecycle and file transfer."""
from __future__ import annotations

import asyncio
import os
import uuid
from datetime import UTC, datetime

import pytest

from pulse_harness.correlation import field_equals
from pulse_harness.testing import expect_event

pytestmark = pytest.mark.e2e

USER_EVENTS = "user-events"
ORDER_EVENTS = "order-events"


def _run_id() -> str:
    return uuid.uuid4().hex[:12]


class TestUsersApi:
    def test_lists_users(self, live_scenario) -> None:
        async def run() -> None:
            async with live_scenario() as sc:
                response = await sc.trigger.get("/users")
                assert response.status_code == 200
                assert isinstance(response.body, list)

        asyncio.run(run())

    def test_creates_user(self, live_scenario) -> None:
        user = {"name": "John Doe", "email": f"john.doe+{_run_id()}@example.com", "status": "active"}

        async def run() -> None:
            async with live_scenario() as sc:
                response = await sc.trigger.post("/users", user)
                assert response.status_code == 201
                assert response.body["name"] == user["name"]
                assert response.body["email"] == user["email"]
                assert response.body["id"]

        asyncio.run(run())


class TestKafkaRoundTrip:
    def test_published_user_event_is_consumed(self, live_scenario, live_publisher) -> None:
        user_id = f"user-{_run_id()}"
        message = {"eventType": "USER_CREATED", "userId": user_id, "timestamp": datetime.now(UTC).isoformat()}

        async def run() -> None:
            async with live_scenario() as sc, live_publisher() as producer:
                consumed = await sc.expect(USER_EVENTS, field_equals(userId=user_id), timeout=5)
                await producer.publish(USER_EVENTS, message, key=user_id)
                event = expect_event(await consumed)
                assert event.value["eventType"] == "USER_CREATED"
                assert event.value["userId"] == user_id
                assert event.key == user_id

        asyncio.run(run())


class TestMongoAccess:
    def test_inserts_and_queries_product(self, live_scenario) -> None:
        product = {
            "name": f"Test Product {_run_id()}",
            "price": 99.99,
            "category": "electronics",
            "createdAt": datetime.now(UTC),
        }

        async def run() -> None:
            async with live_scenario() as sc:
                (inserted_id,) = await sc.store.insert("products", product)
                sc.defer(lambda: sc.store.delete("products", {"_id": inserted_id}))

                found = await sc.store.find("products", {"name": product["name"]})
                assert len(found) == 1
                assert found[0]["name"] == product["name"]
                assert found[0]["price"] == product["price"]

        asyncio.run(run())


class TestOrderLifecycle:
    def test_order_is_announced_persisted_and_confirmed(self, live_scenario) -> None:
        order = {
            "customerId": f"cust-{_run_id()}",
            "items": [{"productId": "prod-456", "quantity": 2}],
            "total": 199.98,
        }

        async def run() -> None:
            async with live_scenario() as sc:
                created = await sc.expect(
                    ORDER_EVENTS,
                    field_equals(customerId=order["customerId"], eventType="ORDER_CREATED"),
                    timeout=5,
                )
                response = await sc.trigger.post("/orders", order)
                assert response.status_code == 201
                order_id = response.body["id"]
                sc.defer(lambda: sc.store.delete("orders", {"orderId": order_id}))

                event = expect_event(await created)
                assert event.value["orderId"] == order_id
                assert event.value["customerId"] == order["customerId"]

                stored = await sc.store.find_one("orders", {"orderId": order_id})
                assert stored is not None
                assert stored["customerId"] == order["customerId"]
                assert stored["total"] == order["total"]
                assert stored["status"] == "pending"

                updated = await sc.trigger.put(f"/orders/{order_id}", {"status": "confirmed"})
                assert updated.status_code == 200
                assert updated.body["status"] == "confirmed"

        asyncio.run(run())


@pytest.mark.skipif(
    not (os.environ.get("SFTP_PASSWORD") or os.environ.get("SFTP_PRIVATE_KEY_PATH")),
    reason="needs SFTP_PASSWORD or SFTP_PRIVATE_KEY_PATH",
)
class TestFileTransfer:
    def test_uploads_and_downloads_over_sftp(self, live_scenario, tmp_path) -> None:
        name = f"sample-{_run_id()}.txt"
        local = tmp_path / name
        local.write_text("pulse-harness sample upload\n")
        remote = f"/test-uploads/{name}"
        downloaded = tmp_path / "downloads" / name

        async def run() -> None:
            async with live_scenario() as sc:
                await sc.files.upload(local, remote, "sftp")
                listing = await sc.files.list("/test-uploads", "sftp")
                assert name in [f.name for f in listing]
                await sc.files.download(remote, downloaded, "sftp")

        asyncio.run(run())
        assert downloaded.read_text() == local.read_text()
