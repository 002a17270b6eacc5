"""Kafka adapter – KafkaEventStream (one aiokafka consumer per group)."""
from __future__ import annotations

import asyncio
from typing import Any

from pulse_harness.adapters.kafka.connection import _require_aiokafka, client_options
from pulse_harness.config import KafkaSettings
from pulse_harness.kernel.errors import TransportError
from pulse_harness.kernel.messaging import MessageStream, Origin, RawRecord, StreamReader
from pulse_harness.observability.logging import get_logger

logger = get_logger(__name__)

_ASSIGNMENT_POLL_MS = 100


def _to_raw(record: Any) -> RawRecord:
    return RawRecord(
        topic=record.topic,
        partition=record.partition,
        offset=record.offset,
        key=record.key,
        value=record.value,
        timestamp_ms=record.timestamp,
        headers=tuple((k, v if v is not None else b"") for k, v in (record.headers or ())),
    )


def _flatten(batch: dict[Any, list[Any]]) -> list[RawRecord]:
    return [_to_raw(r) for records in batch.values() for r in records]


class _KafkaStreamReader(StreamReader):
    """Wraps one started ``AIOKafkaConsumer``; auto-commit is disabled."""

    def __init__(self, consumer: Any, topic: str, group_id: str) -> None:
        self._consumer = consumer
        self._topic = topic
        self._group_id = group_id
        self._pending: list[RawRecord] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def wait_for_assignment(self, timeout: float) -> None:
        """Poll until partitions are assigned, buffering anything fetched meanwhile.

        A ``latest`` group only fixes its start position once it owns
        partitions, so the reader is not handed out before that.
        """
        loop = asyncio.get_running_loop()
        give_up_at = loop.time() + timeout
        while not self._consumer.assignment():
            if loop.time() >= give_up_at:
                raise TransportError(
                    f"No partitions assigned for '{self._topic}' within {timeout}s",
                    topic=self._topic,
                    detail={"group_id": self._group_id},
                )
            self._pending.extend(await self._fetch(_ASSIGNMENT_POLL_MS))
        aiokafka = _require_aiokafka()
        try:
            # resolves the start offset of every partition before returning
            for partition in self._consumer.assignment():
                await self._consumer.position(partition)
        except aiokafka.errors.KafkaError as exc:
            raise TransportError(f"Kafka offset lookup failed: {exc}", topic=self._topic, cause=exc) from exc

    async def poll(self, timeout: float) -> list[RawRecord]:
        if self._pending:
            records, self._pending = self._pending, []
            return records
        return await self._fetch(max(int(timeout * 1000), 1))

    async def _fetch(self, timeout_ms: int) -> list[RawRecord]:
        aiokafka = _require_aiokafka()
        try:
            batch = await self._consumer.getmany(timeout_ms=timeout_ms)
        except aiokafka.errors.KafkaError as exc:
            raise TransportError(f"Kafka fetch failed: {exc}", topic=self._topic, cause=exc) from exc
        return _flatten(batch)

    async def commit(self) -> None:
        aiokafka = _require_aiokafka()
        try:
            await self._consumer.commit()
        except aiokafka.errors.KafkaError as exc:
            raise TransportError(f"Kafka commit failed: {exc}", topic=self._topic, cause=exc) from exc

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        aiokafka = _require_aiokafka()
        try:
            await self._consumer.stop()
        except aiokafka.errors.KafkaError as exc:
            raise TransportError(f"Kafka consumer stop failed: {exc}", topic=self._topic, cause=exc) from exc
        logger.debug("kafka.consumer_stopped", topic=self._topic, group_id=self._group_id)


class KafkaEventStream(MessageStream):
    """``MessageStream`` that opens a dedicated ``AIOKafkaConsumer`` per group id.

    Parameters
    ----------
    bootstrap_servers:
        Comma-separated broker list.
    assignment_timeout:
        Seconds ``subscribe`` waits for the group to receive partitions.
    **consumer_kwargs:
        Passed through to ``AIOKafkaConsumer``.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        *,
        assignment_timeout: float = 10.0,
        **consumer_kwargs: Any,
    ) -> None:
        _require_aiokafka()
        self._bootstrap_servers = bootstrap_servers
        self._assignment_timeout = assignment_timeout
        self._consumer_kwargs = consumer_kwargs
        self._readers: dict[str, _KafkaStreamReader] = {}

    @classmethod
    def from_settings(cls, settings: KafkaSettings) -> "KafkaEventStream":
        options = client_options(settings)
        return cls(
            options.pop("bootstrap_servers"),
            assignment_timeout=settings.connection_timeout_ms / 1000,
            **options,
        )

    @property
    def active_groups(self) -> list[str]:
        return [group for group, reader in self._readers.items() if not reader.closed]

    async def subscribe(self, topic: str, group_id: str, origin: Origin) -> StreamReader:
        aiokafka = _require_aiokafka()
        consumer = aiokafka.AIOKafkaConsumer(
            topic,
            bootstrap_servers=self._bootstrap_servers,
            group_id=group_id,
            auto_offset_reset=origin.value,
            enable_auto_commit=False,
            **self._consumer_kwargs,
        )
        try:
            await consumer.start()
        except aiokafka.errors.KafkaError as exc:
            raise TransportError(f"Kafka consumer failed to start: {exc}", topic=topic, cause=exc) from exc
        reader = _KafkaStreamReader(consumer, topic, group_id)
        self._readers[group_id] = reader
        try:
            await reader.wait_for_assignment(self._assignment_timeout)
        except BaseException:
            await self.unsubscribe(group_id)
            raise
        logger.info("kafka.subscribed", topic=topic, group_id=group_id, origin=origin.value)
        return reader

    async def unsubscribe(self, group_id: str) -> None:
        reader = self._readers.pop(group_id, None)
        if reader is not None:
            await reader.close()

    async def close(self) -> None:
        """Stop every consumer still open."""
        for group_id in list(self._readers):
            await self.unsubscribe(group_id)

    async def __aenter__(self) -> "KafkaEventStream":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


__all__ = ["KafkaEventStream"]
