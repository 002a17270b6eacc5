"""Kernel – framework-agnostic building blocks."""

from pulse_harness.kernel.errors import (
    ApplicationError,
    BaseError,
    ConnectionError,
    DomainError,
    ExternalServiceError,
    HarnessError,
    InfrastructureError,
    InfrastructureTimeoutError,
    InvariantViolationError,
    SerializationError,
    TransportError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConnectionError",
    "DomainError",
    "ExternalServiceError",
    "HarnessError",
    "InfrastructureError",
    "InfrastructureTimeoutError",
    "InvariantViolationError",
    "SerializationError",
    "TransportError",
    "ValidationError",
]
