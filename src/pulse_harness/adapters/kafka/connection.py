"""Kafka adapter – shared aiokafka client options."""
from __future__ import annotations

from typing import Any

from pulse_harness.config import KafkaSettings


def _require_aiokafka() -> Any:
    try:
        import aiokafka  # type: ignore[import-untyped]
        return aiokafka
    except ImportError as exc:
        raise ImportError("Install 'pulse-harness[kafka]' to use the Kafka adapter") from exc


def client_options(settings: KafkaSettings) -> dict[str, Any]:
    """Keyword arguments common to ``AIOKafkaProducer`` and ``AIOKafkaConsumer``.

    SASL/PLAIN is enabled when both username and password are set; ``ssl``
    switches the protocol to ``SSL`` / ``SASL_SSL``.
    """
    options: dict[str, Any] = {
        "bootstrap_servers": settings.bootstrap_servers,
        "client_id": settings.client_id,
        "request_timeout_ms": settings.request_timeout_ms,
    }
    if settings.ssl:
        from aiokafka.helpers import create_ssl_context  # type: ignore[import-untyped]

        options["ssl_context"] = create_ssl_context()
    if settings.uses_sasl:
        options["security_protocol"] = "SASL_SSL" if settings.ssl else "SASL_PLAINTEXT"
        options["sasl_mechanism"] = "PLAIN"
        options["sasl_plain_username"] = settings.username
        options["sasl_plain_password"] = settings.password
    elif settings.ssl:
        options["security_protocol"] = "SSL"
    return options


__all__ = ["client_options"]
