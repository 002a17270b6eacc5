"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── InvariantViolationError
    │   └── ValidationError
    ├── ApplicationError     (application.py)
    └── InfrastructureError  (infrastructure.py)
        ├── ConnectionError
        ├── TransportError
        ├── TimeoutError
        ├── SerializationError
        ├── ExternalServiceError
        └── HarnessError
"""

from pulse_harness.kernel.errors.application import ApplicationError
from pulse_harness.kernel.errors.base import BaseError
from pulse_harness.kernel.errors.domain import (
    DomainError,
    InvariantViolationError,
    ValidationError,
)
from pulse_harness.kernel.errors.infrastructure import (
    ConnectionError,
    ExternalServiceError,
    HarnessError,
    InfrastructureError,
    SerializationError,
    TransportError,
)
from pulse_harness.kernel.errors.infrastructure import TimeoutError as InfrastructureTimeoutError

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
