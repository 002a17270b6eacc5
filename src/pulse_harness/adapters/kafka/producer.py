"""Kafka adapter – KafkaPublisher."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pulse_harness.adapters.kafka.connection import _require_aiokafka, client_options
from pulse_harness.config import KafkaSettings
from pulse_harness.kernel.errors import TransportError
from pulse_harness.kernel.messaging import JsonMessageSerializer, MessagePublisher, MessageSerializer, PublishAck
from pulse_harness.observability.logging import get_logger

logger = get_logger(__name__)


class KafkaPublisher(MessagePublisher):
    """aiokafka-backed producer implementing ``MessagePublisher``."""

    def __init__(
        self,
        bootstrap_servers: str,
        serializer: MessageSerializer | None = None,
        **producer_kwargs: Any,
    ) -> None:
        aiokafka = _require_aiokafka()
        self._producer = aiokafka.AIOKafkaProducer(bootstrap_servers=bootstrap_servers, **producer_kwargs)
        self._serializer = serializer or JsonMessageSerializer()
        self._started = False

    @classmethod
    def from_settings(cls, settings: KafkaSettings, serializer: MessageSerializer | None = None) -> "KafkaPublisher":
        options = client_options(settings)
        return cls(options.pop("bootstrap_servers"), serializer, **options)

    async def start(self) -> None:
        aiokafka = _require_aiokafka()
        try:
            await self._producer.start()
        except aiokafka.errors.KafkaError as exc:
            raise TransportError(f"Kafka producer failed to start: {exc}", cause=exc) from exc
        self._started = True
        logger.info("kafka.producer_started")

    async def stop(self) -> None:
        if not self._started:
            return
        await self._producer.stop()
        self._started = False
        logger.info("kafka.producer_stopped")

    async def __aenter__(self) -> "KafkaPublisher":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    async def publish(
        self,
        topic: str,
        value: Any,
        key: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> PublishAck:
        if not self._started:
            await self.start()
        aiokafka = _require_aiokafka()
        try:
            metadata = await self._producer.send_and_wait(
                topic,
                value=self._serializer.serialize(value),
                key=str(key).encode() if key is not None else None,
                headers=[(k, v.encode()) for k, v in (headers or {}).items()],
            )
        except aiokafka.errors.KafkaError as exc:
            logger.error("kafka.publish_failed", topic=topic, key=key, error=repr(exc))
            raise TransportError(f"Failed to publish to '{topic}': {exc}", topic=topic, cause=exc) from exc
        logger.debug("kafka.published", topic=topic, key=key, partition=metadata.partition, offset=metadata.offset)
        return PublishAck(topic=metadata.topic, partition=metadata.partition, offset=metadata.offset)


__all__ = ["KafkaPublisher"]
