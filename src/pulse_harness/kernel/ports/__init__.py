"""Kernel ports – collaborator interfaces used by test scenarios."""
from pulse_harness.kernel.ports.action import ActionResponse, ActionTrigger
from pulse_harness.kernel.ports.files import Backend, FileStore, FileTransfer, RemoteFile
from pulse_harness.kernel.ports.store import Document, Filter, StateStore

__all__ = [
    "ActionResponse",
    "ActionTrigger",
    "Backend",
    "Document",
    "FileStore",
    "FileTransfer",
    "Filter",
    "RemoteFile",
    "StateStore",
]
