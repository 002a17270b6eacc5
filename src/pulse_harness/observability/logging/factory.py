"""Observability – JsonLoggerFactory."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import structlog

from pulse_harness.observability.logging.filters import SensitiveFieldsFilter
from pulse_harness.observability.logging.processors import ScenarioContextProcessor

if TYPE_CHECKING:
    from pulse_harness.config import LogSettings


class JsonLoggerFactory:
    """Configure structlog on top of the stdlib root logger."""

    @staticmethod
    def configure(
        level: int | str = logging.INFO,
        sensitive_fields: frozenset[str] | None = None,
        *,
        renderer: str = "json",
        log_file: str | None = None,
    ) -> None:
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        shared_processors: list[Any] = [
            structlog.contextvars.merge_contextvars,
            ScenarioContextProcessor(),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            SensitiveFieldsFilter(sensitive_fields),
        ]

        structlog.configure(
            processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        final = (
            structlog.dev.ConsoleRenderer(colors=False)
            if renderer == "console"
            else structlog.processors.JSONRenderer()
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                final,
            ],
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)
        if log_file:
            # Files always get JSON so they can be shipped as CI artifacts.
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(
                structlog.stdlib.ProcessorFormatter(
                    processors=[
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.processors.JSONRenderer(),
                    ],
                )
            )
            root.addHandler(file_handler)
        root.setLevel(level)

    @classmethod
    def configure_from_settings(cls, settings: LogSettings) -> None:
        """Apply ``LOG_LEVEL`` / ``LOG_FORMAT`` / ``LOG_FILE``."""
        cls.configure(settings.level, renderer=settings.format, log_file=settings.file)


__all__ = ["JsonLoggerFactory"]
