"""Testing fixtures – pytest plugin (registered through the ``pytest11`` entry point)."""
from pulse_harness.testing.fixtures.doubles import fake_clock, fake_trigger, in_memory_broker, in_memory_store
from pulse_harness.testing.fixtures.engine import correlation_engine, harness_settings, release_outstanding, scenario


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: needs Docker (testcontainers)")
    config.addinivalue_line("markers", "e2e: runs against a deployed environment (--run-e2e)")


__all__ = [
    "correlation_engine",
    "fake_clock",
    "fake_trigger",
    "harness_settings",
    "in_memory_broker",
    "in_memory_store",
    "pytest_configure",
    "release_outstanding",
    "scenario",
]
