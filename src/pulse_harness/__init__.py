"""
pulse_harness – event-correlated end-to-end test harness.

Import path convention::

    from pulse_harness.correlation import CorrelationEngine, field_equals
    from pulse_harness.adapters.kafka import KafkaEventStream, KafkaPublisher
    from pulse_harness.testing import Scenario, expect_event
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
