"""Testing – fakes, scenario runner, assertions and pytest fixtures."""
from pulse_harness.testing.assertions import expect_event, expect_events, expect_no_event
from pulse_harness.testing.scenario import Scenario

__all__ = ["Scenario", "expect_event", "expect_events", "expect_no_event"]
