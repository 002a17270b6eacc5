"""Shared pytest configuration: harness fixtures and the ``--run-e2e`` switch."""
from __future__ import annotations

import pytest

pytest_plugins = ["pulse_harness.testing.fixtures"]


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="run end-to-end scenario suites against API_BASE_URL / KAFKA_BROKERS",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-e2e"):
        return
    skip_e2e = pytest.mark.skip(reason="needs --run-e2e and a deployed environment")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)
