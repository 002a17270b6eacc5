"""Config settings – 12-factor env-based configuration."""
from pulse_harness.config.settings.base import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    Settings,
)
from pulse_harness.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
