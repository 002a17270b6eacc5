"""MongoDB adapter – MongoStateStore."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pulse_harness.config import MongoSettings
from pulse_harness.kernel.errors import ConnectionError, ExternalServiceError
from pulse_harness.kernel.ports import Document, Filter, StateStore
from pulse_harness.observability.logging import get_logger

logger = get_logger(__name__)


def _require_motor() -> Any:
    try:
        import motor.motor_asyncio  # type: ignore[import-untyped]
        return motor.motor_asyncio
    except ImportError as exc:
        raise ImportError("Install 'pulse-harness[mongodb]' to use the MongoDB adapter") from exc


def _pymongo_error() -> type[Exception]:
    from pymongo.errors import PyMongoError  # type: ignore[import-untyped]

    return PyMongoError


class MongoStateStore(StateStore):
    """Motor-backed :class:`StateStore` over one database.

    Call :meth:`connect` (or use ``async with``) before any query; the
    server is pinged so a bad URI fails here rather than on first use.
    """

    def __init__(
        self,
        uri: str,
        database: str,
        *,
        client: Any = None,
        **client_kwargs: Any,
    ) -> None:
        self._uri = uri
        self._database_name = database
        self._client = client
        self._client_kwargs = client_kwargs
        self._db: Any = None

    @classmethod
    def from_settings(cls, settings: MongoSettings) -> "MongoStateStore":
        kwargs: dict[str, Any] = {"serverSelectionTimeoutMS": settings.server_selection_timeout_ms}
        if settings.username and settings.password:
            kwargs["username"] = settings.username
            kwargs["password"] = settings.password
        return cls(settings.uri, settings.database, **kwargs)

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    async def connect(self) -> None:
        if self._db is not None:
            return
        if self._client is None:
            self._client = _require_motor().AsyncIOMotorClient(self._uri, **self._client_kwargs)
        try:
            await self._client.admin.command("ping")
        except _pymongo_error() as exc:
            logger.error("mongodb.connect_failed", database=self._database_name, error=repr(exc))
            raise ConnectionError("mongodb", f"Could not connect to MongoDB: {exc}", cause=exc) from exc
        self._db = self._client[self._database_name]
        logger.info("mongodb.connected", database=self._database_name)

    async def disconnect(self) -> None:
        if self._client is None:
            return
        self._client.close()
        self._client = None
        self._db = None
        logger.info("mongodb.disconnected", database=self._database_name)

    async def __aenter__(self) -> "MongoStateStore":
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()

    # ------------------------------------------------------------------
    # StateStore interface
    # ------------------------------------------------------------------

    async def find(
        self,
        collection: str,
        filter: Filter | None = None,
        *,
        projection: Mapping[str, Any] | None = None,
        sort: Sequence[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int = 0,
    ) -> list[Document]:
        col = self._collection(collection)
        cursor = col.find(dict(filter or {}), projection)
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        docs = await self._run(collection, "find", cursor.to_list(length=None))
        logger.debug("mongodb.found", collection=collection, count=len(docs))
        return docs

    async def find_one(self, collection: str, filter: Filter | None = None) -> Document | None:
        doc = await self._run(collection, "find_one", self._collection(collection).find_one(dict(filter or {})))
        logger.debug("mongodb.found_one", collection=collection, found=doc is not None)
        return doc

    async def insert(self, collection: str, documents: Document | Sequence[Document]) -> list[Any]:
        col = self._collection(collection)
        if isinstance(documents, Mapping):
            result = await self._run(collection, "insert", col.insert_one(dict(documents)))
            ids = [result.inserted_id]
        else:
            result = await self._run(collection, "insert", col.insert_many([dict(d) for d in documents]))
            ids = list(result.inserted_ids)
        logger.info("mongodb.inserted", collection=collection, count=len(ids))
        return ids

    async def update(
        self,
        collection: str,
        filter: Filter,
        update: Mapping[str, Any],
        *,
        upsert: bool = False,
        multiple: bool = False,
    ) -> int:
        col = self._collection(collection)
        op = col.update_many if multiple else col.update_one
        result = await self._run(collection, "update", op(dict(filter), dict(update), upsert=upsert))
        logger.info("mongodb.updated", collection=collection, modified=result.modified_count, upsert=upsert)
        return result.modified_count

    async def delete(self, collection: str, filter: Filter, *, multiple: bool = False) -> int:
        col = self._collection(collection)
        op = col.delete_many if multiple else col.delete_one
        result = await self._run(collection, "delete", op(dict(filter)))
        logger.info("mongodb.deleted", collection=collection, deleted=result.deleted_count)
        return result.deleted_count

    async def count(self, collection: str, filter: Filter | None = None) -> int:
        return await self._run(collection, "count", self._collection(collection).count_documents(dict(filter or {})))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _collection(self, name: str) -> Any:
        if self._db is None:
            raise ConnectionError("mongodb", "MongoDB not connected; call connect() first")
        return self._db[name]

    async def _run(self, collection: str, operation: str, awaitable: Any) -> Any:
        try:
            return await awaitable
        except _pymongo_error() as exc:
            logger.error("mongodb.operation_failed", collection=collection, operation=operation, error=repr(exc))
            raise ExternalServiceError(
                "mongodb", f"MongoDB {operation} on '{collection}' failed: {exc}", target=collection, cause=exc
            ) from exc


__all__ = ["MongoStateStore"]
