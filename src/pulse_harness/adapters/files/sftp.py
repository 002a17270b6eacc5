"""Files adapter – SftpFileStore (requires 'asyncssh' extra)."""
from __future__ import annotations

import posixpath
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pulse_harness.config import ConfigError, SftpSettings
from pulse_harness.kernel.errors import ConnectionError, ExternalServiceError
from pulse_harness.kernel.ports import FileStore, RemoteFile
from pulse_harness.observability.logging import get_logger

__all__ = ["SftpFileStore"]

logger = get_logger(__name__)


def _require_asyncssh() -> Any:  # pragma: no cover
    try:
        import asyncssh  # noqa: PLC0415
        return asyncssh
    except ImportError as exc:
        raise ImportError("Install 'pulse-harness[files]' to use the SFTP adapter") from exc


class SftpFileStore(FileStore):
    """FileStore over SFTP; one SSH connection per operation.

    A private key takes precedence over a password. With neither configured
    every operation raises :class:`ConfigError`. ``known_hosts=None`` in the
    settings disables host-key checking, which suits throwaway test hosts.
    """

    def __init__(self, settings: SftpSettings) -> None:
        self._settings = settings

    def _connect_options(self) -> dict[str, Any]:
        s = self._settings
        options: dict[str, Any] = {
            "port": s.port,
            "username": s.username,
            "known_hosts": s.known_hosts,
        }
        if s.private_key_path:
            options["client_keys"] = [s.private_key_path]
        elif s.password:
            options["password"] = s.password
            options["client_keys"] = None
        else:
            raise ConfigError("SFTP authentication credentials not configured")
        return options

    async def _run(self, operation: str, remote: str, action: Any) -> Any:
        options = self._connect_options()
        asyncssh = _require_asyncssh()
        try:
            conn = await asyncssh.connect(self._settings.host, **options)
        except (OSError, asyncssh.Error) as exc:
            logger.error("sftp.connect_failed", host=self._settings.host, error=repr(exc))
            raise ConnectionError(f"sftp://{self._settings.host}:{self._settings.port}", cause=exc) from exc
        try:
            async with conn, conn.start_sftp_client() as sftp:
                return await action(sftp)
        except (OSError, asyncssh.Error) as exc:
            logger.error("sftp.operation_failed", operation=operation, remote=remote, error=repr(exc))
            raise ExternalServiceError(
                "sftp", f"SFTP {operation} of '{remote}' failed: {exc}", target=remote, cause=exc
            ) from exc

    async def upload(self, local: Path, remote: str) -> None:
        logger.info("sftp.uploading", local=str(local), remote=remote)

        async def _put(sftp: Any) -> None:
            remote_dir = posixpath.dirname(remote)
            if remote_dir:
                await sftp.makedirs(remote_dir, exist_ok=True)
            await sftp.put(str(local), remote)

        await self._run("upload", remote, _put)
        logger.info("sftp.uploaded", remote=remote)

    async def download(self, remote: str, local: Path) -> None:
        local = Path(local)
        logger.info("sftp.downloading", remote=remote, local=str(local))
        local.parent.mkdir(parents=True, exist_ok=True)

        async def _get(sftp: Any) -> None:
            await sftp.get(remote, str(local))

        await self._run("download", remote, _get)
        logger.info("sftp.downloaded", local=str(local))

    async def list(self, remote: str) -> list[RemoteFile]:
        asyncssh = _require_asyncssh()

        async def _readdir(sftp: Any) -> list[RemoteFile]:
            entries = await sftp.readdir(remote)
            files = []
            for entry in entries:
                if entry.filename in (".", ".."):
                    continue
                attrs = entry.attrs
                files.append(
                    RemoteFile(
                        name=entry.filename,
                        path=posixpath.join(remote, entry.filename),
                        size=attrs.size or 0,
                        modified_at=datetime.fromtimestamp(attrs.mtime, UTC) if attrs.mtime is not None else None,
                        is_dir=attrs.type == asyncssh.FILEXFER_TYPE_DIRECTORY,
                    )
                )
            return files

        files = await self._run("list", remote, _readdir)
        logger.debug("sftp.listed", remote=remote, count=len(files))
        return files
