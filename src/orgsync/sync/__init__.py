"""Sync orchestration package combining the outline and the remote service."""

from .service import (
    CreatedTask,
    DownloadResult,
    FlowState,
    SyncService,
    UploadFailure,
    UploadResult,
)

__all__ = [
    "CreatedTask",
    "DownloadResult",
    "FlowState",
    "SyncService",
    "UploadFailure",
    "UploadResult",
]
