"""Kernel messaging – publish/subscribe ports."""
from __future__ import annotations

import abc
from collections.abc import Mapping
from typing import Any

from pulse_harness.kernel.messaging.record import Event, Origin, PublishAck, RawRecord


class MessagePublisher(abc.ABC):
    """Port: publish structured values to a topic."""

    @abc.abstractmethod
    async def publish(
        self,
        topic: str,
        value: Any,
        key: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> PublishAck: ...


class StreamReader(abc.ABC):
    """One consumer-group read position on one topic.

    Implementations raise :class:`~pulse_harness.kernel.errors.TransportError`
    when the connection drops; ``close`` must be idempotent.
    """

    @abc.abstractmethod
    async def poll(self, timeout: float) -> list[RawRecord]:
        """Return the next batch (possibly empty) within *timeout* seconds."""

    @abc.abstractmethod
    async def commit(self) -> None:
        """Acknowledge everything returned by ``poll`` so far."""

    @abc.abstractmethod
    async def close(self) -> None: ...


class MessageStream(abc.ABC):
    """Port: subscribe to a topic under an isolated consumer group."""

    @abc.abstractmethod
    async def subscribe(self, topic: str, group_id: str, origin: Origin) -> StreamReader: ...

    @abc.abstractmethod
    async def unsubscribe(self, group_id: str) -> None: ...


class EventDecoder(abc.ABC):
    """Port: turn a transport record into an :class:`Event`.

    Raises :class:`~pulse_harness.kernel.errors.SerializationError` for a
    record that cannot be decoded; the failure concerns that record only.
    """

    @abc.abstractmethod
    def decode(self, record: RawRecord) -> Event: ...


class MessageSerializer(abc.ABC):
    """Port: encode an outgoing value to bytes."""

    @abc.abstractmethod
    def serialize(self, value: Any) -> bytes: ...


__all__ = [
    "EventDecoder",
    "MessagePublisher",
    "MessageSerializer",
    "MessageStream",
    "StreamReader",
]
