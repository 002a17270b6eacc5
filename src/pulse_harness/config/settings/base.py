"""Config settings – Settings base class and configuration errors.

Sections validate their own values in ``__post_init__`` and only know field
names there. The loaders re-raise those failures naming the environment
variable to fix and the ``TEST_ENV`` profile being loaded.
"""
from __future__ import annotations

import dataclasses
from typing import Any

from pulse_harness.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Harness configuration is missing or unusable.

    ``env_var`` is the variable to fix and ``profile`` the ``TEST_ENV``
    being loaded; either may be unknown.
    """

    default_code = "config_error"

    def __init__(
        self,
        message: str,
        *,
        env_var: str | None = None,
        profile: str | None = None,
        **kwargs: Any,
    ) -> None:
        if profile:
            message = f"{message} (TEST_ENV={profile})"
        kwargs.setdefault("target", env_var)
        super().__init__(message, **kwargs)
        self.env_var = env_var
        self.profile = profile

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.profile is not None:
            payload["profile"] = self.profile
        return payload


class MissingRequiredSettingError(ConfigError):
    default_code = "missing_required_setting"

    def __init__(self, env_var: str, *, profile: str | None = None) -> None:
        super().__init__(f"Required setting {env_var} is not set", env_var=env_var, profile=profile)


class InvalidSettingValueError(ConfigError):
    """A setting is present but its value cannot be used."""

    default_code = "invalid_setting_value"

    def __init__(
        self,
        setting_name: str,
        value: object,
        reason: str,
        *,
        env_var: str | None = None,
        profile: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Setting {env_var or setting_name} has invalid value {value!r}: {reason}",
            env_var=env_var,
            profile=profile,
            **kwargs,
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason

    def located(self, env_var: str, profile: str | None = None) -> "InvalidSettingValueError":
        """The same failure, attributed to *env_var* under *profile*."""
        return type(self)(self.setting_name, self.value, self.reason, env_var=env_var, profile=profile)


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    ``_prefix`` is prepended (with ``_``) to every field name to form the
    environment variable, e.g. ``KafkaSettings.brokers`` -> ``KAFKA_BROKERS``.
    """

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    @classmethod
    def env_var(cls, field_name: str) -> str:
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    def _require_positive(self, *names: str) -> None:
        for name in names:
            value = getattr(self, name)
            if value <= 0:
                raise InvalidSettingValueError(name, value, "must be > 0")


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError", "Settings"]
