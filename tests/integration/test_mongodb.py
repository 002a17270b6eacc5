"""Integration tests for MongoStateStore.

Run with::

    pytest -m integration tests/integration/test_mongodb.py -v

Requires Docker (used automatically via ``testcontainers``).
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from testcontainers.mongodb import MongoDbContainer

from pulse_harness.adapters.mongodb import MongoStateStore
from pulse_harness.kernel.errors import ConnectionError


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


@pytest.fixture(scope="module")
def mongo_uri() -> str:  # type: ignore[return]
    with MongoDbContainer("mongo:7.0") as mongo:
        yield mongo.get_connection_url()


@pytest.fixture()
def database(request: Any) -> str:
    """Fresh database name per test (MongoDB caps names at 63 chars)."""
    safe_name = request.node.name.replace("[", "_").replace("]", "_")
    return safe_name[:63]


_ORDERS = [
    {"orderId": "o-1", "status": "PAID", "total": 30},
    {"orderId": "o-2", "status": "PENDING", "total": 10},
    {"orderId": "o-3", "status": "PAID", "total": 20},
]


# ---------------------------------------------------------------------------
# CRUD and queries
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestMongoStateStore:
    def test_insert_and_find(self, mongo_uri: str, database: str) -> None:
        async def run() -> list[dict]:
            async with MongoStateStore(mongo_uri, database) as store:
                ids = await store.insert("orders", [dict(o) for o in _ORDERS])
                assert len(ids) == 3
                return await store.find(
                    "orders",
                    {"status": "PAID"},
                    projection={"_id": 0},
                    sort=[("total", -1)],
                )

        assert _run(run()) == [
            {"orderId": "o-1", "status": "PAID", "total": 30},
            {"orderId": "o-3", "status": "PAID", "total": 20},
        ]

    def test_update_count_delete(self, mongo_uri: str, database: str) -> None:
        async def run() -> tuple[int, int, int]:
            async with MongoStateStore(mongo_uri, database) as store:
                await store.insert("orders", [dict(o) for o in _ORDERS])
                modified = await store.update(
                    "orders", {"status": "PAID"}, {"$set": {"status": "SHIPPED"}}, multiple=True
                )
                shipped = await store.count("orders", {"status": "SHIPPED"})
                deleted = await store.delete("orders", {}, multiple=True)
                return modified, shipped, deleted

        assert _run(run()) == (2, 2, 3)

    def test_upsert_creates_document(self, mongo_uri: str, database: str) -> None:
        async def run() -> Any:
            async with MongoStateStore(mongo_uri, database) as store:
                await store.update("orders", {"orderId": "o-9"}, {"$set": {"status": "NEW"}}, upsert=True)
                return await store.find_one("orders", {"orderId": "o-9"})

        doc = _run(run())
        assert doc is not None
        assert doc["status"] == "NEW"

    def test_skip_and_limit(self, mongo_uri: str, database: str) -> None:
        async def run() -> list[dict]:
            async with MongoStateStore(mongo_uri, database) as store:
                await store.insert("orders", [dict(o) for o in _ORDERS])
                return await store.find("orders", sort=[("total", 1)], skip=1, limit=1)

        assert [d["orderId"] for d in _run(run())] == ["o-3"]


@pytest.mark.integration
class TestMongoConnectionFailure:
    def test_unreachable_server_raises_connection_error(self) -> None:
        store = MongoStateStore("mongodb://127.0.0.1:1", "nowhere", serverSelectionTimeoutMS=300)
        with pytest.raises(ConnectionError):
            _run(store.connect())
