"""Domain errors: contract and invariant violations inside the harness."""

from __future__ import annotations

from typing import Any

from pulse_harness.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a harness rule / invariant is violated."""

    default_code = "domain_error"


class InvariantViolationError(DomainError):
    """An internal invariant was violated (e.g. a subscription resolved twice)."""

    default_code = "invariant_violation"


class ValidationError(DomainError):
    """A caller passed arguments that break the operation's contract.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


__all__ = [
    "DomainError",
    "InvariantViolationError",
    "ValidationError",
]
