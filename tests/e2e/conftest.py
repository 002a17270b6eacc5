"""Fixtures shared by the scenario suites that run against a live environment."""
from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest

from pulse_harness.adapters.files import FileTransferService
from pulse_harness.adapters.http import HttpxActionTrigger
from pulse_harness.adapters.kafka import KafkaEventStream, KafkaPublisher
from pulse_harness.adapters.mongodb import MongoStateStore
from pulse_harness.config import HarnessSettings
from pulse_harness.correlation import CorrelationEngine
from pulse_harness.observability.logging import JsonLoggerFactory
from pulse_harness.testing import Scenario


@contextlib.asynccontextmanager
async def _live_scenario(settings: HarnessSettings, name: str) -> AsyncIterator[Scenario]:
    async with (
        KafkaEventStream.from_settings(settings.kafka) as stream,
        HttpxActionTrigger.from_settings(settings.api) as api,
        MongoStateStore.from_settings(settings.mongodb) as db,
    ):
        engine = CorrelationEngine.from_settings(stream, settings.correlation, client_id=settings.kafka.client_id)
        files = FileTransferService.from_settings(settings)
        async with engine, Scenario(
            name, engine=engine, trigger=api, store=db, files=files, environment=settings.env
        ) as sc:
            yield sc


@pytest.fixture
def live_scenario(harness_settings: HarnessSettings, request: Any) -> Callable[[], Any]:
    """``async with live_scenario() as sc:`` wires Kafka, the API, MongoDB and file storage from settings."""
    JsonLoggerFactory.configure_from_settings(harness_settings.log)
    return lambda: _live_scenario(harness_settings, request.node.name)


@pytest.fixture
def live_publisher(harness_settings: HarnessSettings) -> Callable[[], KafkaPublisher]:
    """``async with live_publisher() as producer:`` for suites that publish their own events."""
    return lambda: KafkaPublisher.from_settings(harness_settings.kafka)
