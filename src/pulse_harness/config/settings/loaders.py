"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from collections.abc import Mapping
from typing import Any, TypeVar

from dotenv import load_dotenv

from pulse_harness.config.settings.base import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    Settings,
)

T = TypeVar("T", bound=Settings)


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Load settings from OS environment variables (or an explicit mapping).

    *profile* is the ``TEST_ENV`` being loaded; it is reported in every
    :class:`ConfigError` so a failing CI job says which environment's
    variables are wrong.
    """

    def __init__(self, environ: Mapping[str, str] | None = None, *, profile: str | None = None) -> None:
        self._environ = environ
        self._profile = profile

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            env_key = settings_class.env_var(field.name)
            raw = environ.get(env_key)

            if raw is None or raw == "":
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
                ):
                    raise MissingRequiredSettingError(env_key, profile=self._profile)
                continue

            try:
                kwargs[field.name] = self._coerce(raw, field.type)
            except ValueError as exc:
                raise InvalidSettingValueError(
                    field.name, raw, str(exc), env_var=env_key, profile=self._profile, cause=exc
                ) from exc

        try:
            return settings_class(**kwargs)
        except InvalidSettingValueError as exc:
            if exc.env_var is not None:
                raise
            raise exc.located(settings_class.env_var(exc.setting_name), self._profile) from exc
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(
                f"Failed to load {settings_class.__name__}: {exc}", profile=self._profile, cause=exc
            ) from exc

    def _coerce(self, value: str, type_hint: Any) -> Any:  # noqa: PLR0911
        # With postponed annotations field.type is a string such as "list[str]".
        hint = type_hint if isinstance(type_hint, str) else getattr(type_hint, "__name__", str(type_hint))
        origin = getattr(type_hint, "__origin__", None)
        if hint.startswith("bool"):
            return value.strip().lower() in ("1", "true", "yes", "on")
        if hint.startswith("int"):
            return int(value)
        if hint.startswith("float"):
            return float(value)
        if origin is list or hint.startswith("list"):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value


class DotenvSettingsLoader(SettingsLoader):
    """Load settings from a ``.env`` file then fall back to ``EnvSettingsLoader``."""

    def __init__(self, env_file: str = ".env", override: bool = False, *, profile: str | None = None) -> None:
        self._env_file = env_file
        self._override = override
        self._profile = profile

    def apply(self) -> None:
        """Copy the file's variables into ``os.environ``."""
        load_dotenv(self._env_file, override=self._override)

    def load(self, settings_class: type[T]) -> T:
        self.apply()
        return EnvSettingsLoader(profile=self._profile).load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader"]
