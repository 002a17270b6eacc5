"""Kernel messaging – transport records and decoded events."""
from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping
from datetime import datetime
from typing import Any


class Origin(enum.StrEnum):
    """Where a fresh consumer group starts reading."""

    EARLIEST = "earliest"
    LATEST = "latest"


@dataclasses.dataclass(frozen=True)
class RawRecord:
    """Undecoded record exactly as the transport delivered it."""

    topic: str
    partition: int
    offset: int
    key: bytes | None = None
    value: bytes | None = None
    timestamp_ms: int | None = None
    headers: tuple[tuple[str, bytes], ...] = ()

    @property
    def identity(self) -> tuple[str, int, int]:
        return (self.topic, self.partition, self.offset)


@dataclasses.dataclass(frozen=True)
class Event:
    """A decoded message observed on a stream."""

    topic: str
    partition: int
    offset: int
    key: str | None
    value: Mapping[str, Any]
    timestamp: datetime
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)

    @property
    def identity(self) -> tuple[str, int, int]:
        """Stable de-duplication key: offsets are unique per partition."""
        return (self.topic, self.partition, self.offset)


@dataclasses.dataclass(frozen=True)
class PublishAck:
    """Broker acknowledgement for a published message."""

    topic: str
    partition: int
    offset: int


__all__ = ["Event", "Origin", "PublishAck", "RawRecord"]
