"""Files adapter – S3FileStore (requires 'aiobotocore' extra)."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from pulse_harness.config import S3Settings
from pulse_harness.kernel.errors import ExternalServiceError
from pulse_harness.kernel.ports import FileStore, RemoteFile
from pulse_harness.observability.logging import get_logger

__all__ = ["S3FileStore"]

logger = get_logger(__name__)


def _require_aiobotocore() -> Any:  # pragma: no cover
    try:
        import aiobotocore.session  # noqa: PLC0415
        return aiobotocore.session
    except ImportError as exc:
        raise ImportError(
            "aiobotocore is required for S3 file transfer. "
            "Install it with: pip install 'pulse-harness[files]'"
        ) from exc


def _botocore_errors() -> tuple[type[Exception], ...]:
    from botocore.exceptions import BotoCoreError, ClientError  # noqa: PLC0415

    return (BotoCoreError, ClientError)


class S3FileStore(FileStore):
    """FileStore over one S3 bucket using ``aiobotocore``.

    A client is opened per operation; remote paths are object keys.
    """

    def __init__(self, settings: S3Settings, session: Any = None) -> None:
        self._settings = settings
        self._session = session

    def _create_client(self) -> Any:
        if self._session is None:
            self._session = _require_aiobotocore().get_session()
        kwargs: dict[str, Any] = {"region_name": self._settings.aws_region}
        if self._settings.aws_access_key_id:
            kwargs["aws_access_key_id"] = self._settings.aws_access_key_id
            kwargs["aws_secret_access_key"] = self._settings.aws_secret_access_key
        if self._settings.s3_endpoint_url:
            kwargs["endpoint_url"] = self._settings.s3_endpoint_url
        return self._session.create_client("s3", **kwargs)

    async def upload(self, local: Path, remote: str) -> None:
        bucket = self._settings.s3_bucket
        logger.info("s3.uploading", local=str(local), key=remote, bucket=bucket)
        body = Path(local).read_bytes()
        try:
            async with self._create_client() as client:
                await client.put_object(Bucket=bucket, Key=remote, Body=body)
        except _botocore_errors() as exc:
            logger.error("s3.upload_failed", key=remote, error=repr(exc))
            raise ExternalServiceError(
                "s3", f"Upload of '{remote}' failed: {exc}", target=f"s3://{bucket}/{remote}", cause=exc
            ) from exc
        logger.info("s3.uploaded", key=remote, size=len(body))

    async def download(self, remote: str, local: Path) -> None:
        bucket = self._settings.s3_bucket
        local = Path(local)
        logger.info("s3.downloading", key=remote, local=str(local), bucket=bucket)
        try:
            async with self._create_client() as client:
                response = await client.get_object(Bucket=bucket, Key=remote)
                async with response["Body"] as stream:
                    data = await stream.read()
        except _botocore_errors() as exc:
            logger.error("s3.download_failed", key=remote, error=repr(exc))
            raise ExternalServiceError(
                "s3", f"Download of '{remote}' failed: {exc}", target=f"s3://{bucket}/{remote}", cause=exc
            ) from exc
        local.parent.mkdir(parents=True, exist_ok=True)
        local.write_bytes(data)
        logger.info("s3.downloaded", local=str(local), size=len(data))

    async def list(self, remote: str) -> list[RemoteFile]:
        prefix = remote.lstrip("/")
        files: list[RemoteFile] = []
        try:
            async with self._create_client() as client:
                paginator = client.get_paginator("list_objects_v2")
                async for page in paginator.paginate(Bucket=self._settings.s3_bucket, Prefix=prefix):
                    for obj in page.get("Contents", []):
                        key = obj["Key"]
                        files.append(
                            RemoteFile(
                                name=key.rsplit("/", 1)[-1],
                                path=key,
                                size=obj.get("Size", 0),
                                modified_at=obj.get("LastModified"),
                            )
                        )
        except _botocore_errors() as exc:
            raise ExternalServiceError("s3", f"Listing '{prefix}' failed: {exc}", cause=exc) from exc
        logger.debug("s3.listed", prefix=prefix, count=len(files))
        return files
