"""Config – 12-factor settings and loaders."""

from pulse_harness.config.harness import (
    ApiSettings,
    CorrelationSettings,
    HarnessSettings,
    KafkaSettings,
    LogSettings,
    MongoSettings,
    S3Settings,
    SftpSettings,
)
from pulse_harness.config.settings import (
    ConfigError,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    Settings,
    SettingsLoader,
)

__all__ = [
    "ApiSettings",
    "ConfigError",
    "CorrelationSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "HarnessSettings",
    "InvalidSettingValueError",
    "KafkaSettings",
    "LogSettings",
    "MissingRequiredSettingError",
    "MongoSettings",
    "S3Settings",
    "Settings",
    "SettingsLoader",
    "SftpSettings",
]
