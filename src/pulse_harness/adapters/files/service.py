"""Files adapter – FileTransferService (dispatch by backend)."""
from __future__ import annotations

from pathlib import Path

from pulse_harness.config import HarnessSettings
from pulse_harness.kernel.errors import ValidationError
from pulse_harness.kernel.ports import Backend, FileStore, FileTransfer, RemoteFile

__all__ = ["FileTransferService"]


class FileTransferService(FileTransfer):
    """Routes each call to the :class:`FileStore` registered for its backend."""

    def __init__(self, stores: dict[Backend, FileStore]) -> None:
        self._stores = dict(stores)

    @classmethod
    def from_settings(cls, settings: HarnessSettings) -> "FileTransferService":
        from pulse_harness.adapters.files.s3 import S3FileStore
        from pulse_harness.adapters.files.sftp import SftpFileStore

        return cls({Backend.SFTP: SftpFileStore(settings.sftp), Backend.S3: S3FileStore(settings.s3)})

    def store(self, backend: Backend | str) -> FileStore:
        try:
            return self._stores[Backend(backend)]
        except (ValueError, KeyError):
            raise ValidationError(
                f"Unsupported storage backend: {backend!r}. Use 'sftp' or 's3'.",
                errors=[{"field": "backend", "error": "unsupported", "value": str(backend)}],
            ) from None

    async def upload(self, local: Path | str, remote: str, backend: Backend | str = Backend.SFTP) -> None:
        await self.store(backend).upload(Path(local), remote)

    async def download(self, remote: str, local: Path | str, backend: Backend | str = Backend.SFTP) -> None:
        await self.store(backend).download(remote, Path(local))

    async def list(self, remote: str, backend: Backend | str = Backend.SFTP) -> list[RemoteFile]:
        return await self.store(backend).list(remote)
