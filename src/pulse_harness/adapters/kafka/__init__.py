"""Kafka adapter – aiokafka publisher and per-group event stream."""
from pulse_harness.adapters.kafka.consumer import KafkaEventStream
from pulse_harness.adapters.kafka.producer import KafkaPublisher

__all__ = ["KafkaEventStream", "KafkaPublisher"]
