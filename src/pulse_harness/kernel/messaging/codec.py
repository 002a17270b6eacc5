"""Kernel messaging – JSON codec for stream payloads."""
from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from pulse_harness.kernel.errors import SerializationError
from pulse_harness.kernel.messaging.ports import EventDecoder, MessageSerializer
from pulse_harness.kernel.messaging.record import Event, RawRecord
from pulse_harness.kernel.time import Clock, SystemClock


class JsonMessageSerializer(MessageSerializer):
    """JSON serialiser for outgoing values; ``bytes`` pass through untouched."""

    def serialize(self, value: Any) -> bytes:
        if isinstance(value, bytes):
            return value
        return json.dumps(value, default=str).encode()


class JsonEventDecoder(EventDecoder):
    """Decode a record whose value is a UTF-8 JSON object.

    Tombstones, invalid UTF-8, invalid JSON and JSON that is not an object
    all raise :class:`SerializationError`.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()

    def decode(self, record: RawRecord) -> Event:
        where = {"topic": record.topic, "partition": record.partition, "offset": record.offset}
        if record.value is None:
            raise SerializationError("Record has no value", detail=where)
        try:
            parsed = json.loads(record.value)
        except ValueError as exc:
            raise SerializationError(f"Record is not valid JSON: {exc}", detail=where, cause=exc) from exc
        if not isinstance(parsed, dict):
            raise SerializationError(
                "Record value is not a JSON object",
                payload_type=type(parsed).__name__,
                detail=where,
            )
        if record.timestamp_ms is not None:
            timestamp = datetime.fromtimestamp(record.timestamp_ms / 1000, UTC)
        else:
            timestamp = self._clock.now()
        return Event(
            topic=record.topic,
            partition=record.partition,
            offset=record.offset,
            key=record.key.decode("utf-8", errors="replace") if record.key is not None else None,
            value=parsed,
            timestamp=timestamp,
            headers={k: v.decode("utf-8", errors="replace") for k, v in record.headers},
        )


__all__ = ["JsonEventDecoder", "JsonMessageSerializer"]
