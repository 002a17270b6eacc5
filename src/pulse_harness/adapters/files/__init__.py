"""Files adapter – SFTP and S3 stores behind one transfer service."""
from pulse_harness.adapters.files.s3 import S3FileStore
from pulse_harness.adapters.files.service import FileTransferService
from pulse_harness.adapters.files.sftp import SftpFileStore

__all__ = ["FileTransferService", "S3FileStore", "SftpFileStore"]
