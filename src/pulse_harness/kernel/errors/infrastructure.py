"""Infrastructure errors: I/O failures, external integrations.

Everything below :class:`InfrastructureError` means the verification pipe
itself broke, as opposed to the system under test misbehaving.
"""

from __future__ import annotations

from typing import Any

from pulse_harness.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class ConnectionError(InfrastructureError):  # noqa: A001
    """Failed to connect to an external resource (broker, store, SFTP host…)."""

    default_code = "connection_error"

    def __init__(
        self,
        resource: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("target", resource)
        super().__init__(message or f"Could not connect to '{resource}'", **kwargs)
        self.resource = resource


class TransportError(InfrastructureError):
    """The message transport dropped or refused a request mid-operation."""

    default_code = "transport_error"

    def __init__(
        self,
        message: str,
        *,
        topic: str | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("target", topic)
        super().__init__(message, **kwargs)
        self.topic = topic


class TimeoutError(InfrastructureError):  # noqa: A001
    """An I/O operation exceeded its deadline."""

    default_code = "infrastructure_timeout"


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class ExternalServiceError(InfrastructureError):
    """An external service could not be reached or answered garbage."""

    default_code = "external_service_error"

    def __init__(
        self,
        service: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("target", service)
        super().__init__(message or f"External service '{service}' error", **kwargs)
        self.service = service
        self.status_code = status_code


class HarnessError(InfrastructureError):
    """Reported by test assertions when the harness, not the SUT, failed."""

    default_code = "harness_error"


__all__ = [
    "ConnectionError",
    "ExternalServiceError",
    "HarnessError",
    "InfrastructureError",
    "SerializationError",
    "TimeoutError",
    "TransportError",
]
