"""Config – settings sections for every collaborator of the harness."""
from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping

from pulse_harness.config.settings import DotenvSettingsLoader, EnvSettingsLoader, InvalidSettingValueError, Settings


@dataclasses.dataclass
class KafkaSettings(Settings):
    _prefix = "KAFKA"

    brokers: list[str] = dataclasses.field(default_factory=lambda: ["localhost:9092"])
    client_id: str = "pulse-automation-tests"
    username: str | None = None
    password: str | None = None
    ssl: bool = False
    connection_timeout_ms: int = 10_000
    request_timeout_ms: int = 30_000

    def _validate(self) -> None:
        if not self.brokers:
            raise InvalidSettingValueError("brokers", self.brokers, "at least one broker is required")
        self._require_positive("connection_timeout_ms", "request_timeout_ms")

    @property
    def bootstrap_servers(self) -> str:
        return ",".join(self.brokers)

    @property
    def uses_sasl(self) -> bool:
        return bool(self.username and self.password)


@dataclasses.dataclass
class MongoSettings(Settings):
    _prefix = "MONGODB"

    uri: str = "mongodb://localhost:27017"
    database: str = "test_db"
    username: str | None = None
    password: str | None = None
    server_selection_timeout_ms: int = 10_000

    def _validate(self) -> None:
        if not self.uri.startswith(("mongodb://", "mongodb+srv://")):
            raise InvalidSettingValueError("uri", self.uri, "must be a mongodb:// or mongodb+srv:// URI")


@dataclasses.dataclass
class ApiSettings(Settings):
    _prefix = "API"

    base_url: str = "http://localhost:3000"
    timeout: float = 30.0

    def _validate(self) -> None:
        self._require_positive("timeout")


@dataclasses.dataclass
class SftpSettings(Settings):
    _prefix = "SFTP"

    host: str = "localhost"
    port: int = 22
    username: str = "testuser"
    password: str | None = None
    private_key_path: str | None = None
    known_hosts: str | None = None

    def _validate(self) -> None:
        if not 0 < self.port < 65536:
            raise InvalidSettingValueError("port", self.port, "must be between 1 and 65535")


@dataclasses.dataclass
class S3Settings(Settings):
    aws_region: str = "us-east-1"
    s3_bucket: str = "test-bucket"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    s3_endpoint_url: str | None = None


@dataclasses.dataclass
class CorrelationSettings(Settings):
    _prefix = "CORRELATION"

    default_timeout: float = 10.0
    poll_interval: float = 0.1
    retry_attempts: int = 3
    retry_min_backoff: float = 0.1
    retry_max_backoff: float = 2.0

    def _validate(self) -> None:
        self._require_positive("default_timeout", "poll_interval", "retry_attempts", "retry_max_backoff")
        if self.retry_min_backoff > self.retry_max_backoff:
            raise InvalidSettingValueError(
                "retry_min_backoff", self.retry_min_backoff, "must not exceed retry_max_backoff"
            )


@dataclasses.dataclass
class LogSettings(Settings):
    _prefix = "LOG"

    level: str = "INFO"
    format: str = "json"
    file: str | None = None

    def _validate(self) -> None:
        if self.format not in ("json", "console"):
            raise InvalidSettingValueError("format", self.format, "must be 'json' or 'console'")


@dataclasses.dataclass
class HarnessSettings:
    """Every section, plus the name of the target environment (``TEST_ENV``)."""

    env: str = "local"
    kafka: KafkaSettings = dataclasses.field(default_factory=KafkaSettings)
    mongodb: MongoSettings = dataclasses.field(default_factory=MongoSettings)
    api: ApiSettings = dataclasses.field(default_factory=ApiSettings)
    sftp: SftpSettings = dataclasses.field(default_factory=SftpSettings)
    s3: S3Settings = dataclasses.field(default_factory=S3Settings)
    correlation: CorrelationSettings = dataclasses.field(default_factory=CorrelationSettings)
    log: LogSettings = dataclasses.field(default_factory=LogSettings)

    @classmethod
    def load(
        cls,
        env_file: str | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> "HarnessSettings":
        """Build every section from the environment (optionally seeded from *env_file*).

        ``TEST_ENV`` names the profile; a variable set only in *env_file*
        counts. Configuration errors report the profile they were loading.
        """
        if env_file is not None:
            DotenvSettingsLoader(env_file).apply()
            environ = None
        source = os.environ if environ is None else environ
        profile = source.get("TEST_ENV") or "local"
        loader = EnvSettingsLoader(environ, profile=profile)
        return cls(
            env=profile,
            kafka=loader.load(KafkaSettings),
            mongodb=loader.load(MongoSettings),
            api=loader.load(ApiSettings),
            sftp=loader.load(SftpSettings),
            s3=loader.load(S3Settings),
            correlation=loader.load(CorrelationSettings),
            log=loader.load(LogSettings),
        )


__all__ = [
    "ApiSettings",
    "CorrelationSettings",
    "HarnessSettings",
    "KafkaSettings",
    "LogSettings",
    "MongoSettings",
    "S3Settings",
    "SftpSettings",
]
