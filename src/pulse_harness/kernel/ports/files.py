"""Kernel ports – File Transfer (SFTP/S3-style object relay)."""
from __future__ import annotations

import dataclasses
import enum
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable


class Backend(enum.StrEnum):
    SFTP = "sftp"
    S3 = "s3"


@dataclasses.dataclass(frozen=True)
class RemoteFile:
    """One entry of a remote listing."""

    name: str
    path: str
    size: int
    modified_at: datetime | None = None
    is_dir: bool = False


@runtime_checkable
class FileStore(Protocol):
    """Port: a single remote backend."""

    async def upload(self, local: Path, remote: str) -> None: ...

    async def download(self, remote: str, local: Path) -> None: ...

    async def list(self, remote: str) -> list[RemoteFile]: ...


@runtime_checkable
class FileTransfer(Protocol):
    """Port: move files to and from whichever backend a test names."""

    async def upload(self, local: Path | str, remote: str, backend: Backend | str = Backend.SFTP) -> None: ...

    async def download(self, remote: str, local: Path | str, backend: Backend | str = Backend.SFTP) -> None: ...

    async def list(self, remote: str, backend: Backend | str = Backend.SFTP) -> list[RemoteFile]: ...


__all__ = ["Backend", "FileStore", "FileTransfer", "RemoteFile"]
