"""Kernel messaging – records, events, stream ports and the JSON codec."""
from pulse_harness.kernel.messaging.record import Event, Origin, PublishAck, RawRecord
from pulse_harness.kernel.messaging.ports import (
    EventDecoder,
    MessagePublisher,
    MessageSerializer,
    MessageStream,
    StreamReader,
)
from pulse_harness.kernel.messaging.codec import JsonEventDecoder, JsonMessageSerializer

__all__ = [
    "Event",
    "EventDecoder",
    "JsonEventDecoder",
    "JsonMessageSerializer",
    "MessagePublisher",
    "MessageSerializer",
    "MessageStream",
    "Origin",
    "PublishAck",
    "RawRecord",
    "StreamReader",
]
