"""Exception types raised by the sync core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .sync.service import CreatedTask, UploadFailure


class SyncError(RuntimeError):
    """Base class for every failure surfaced by a sync flow."""


class RequestError(SyncError):
    """Wrap transport or API failures when talking to the task service."""

    def __init__(self, status_code: Optional[int], detail: Any):
        if status_code is None:
            message = f"Request failed: {detail}"
        else:
            message = f"Request failed with status {status_code}: {detail}"
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class MalformedOutline(SyncError):
    """Raised when the outline text cannot be read into projects and tasks."""

    def __init__(
        self,
        message: str,
        *,
        headline: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        if headline is not None:
            location = f"line {line_number + 1}: " if line_number is not None else ""
            message = f"{message} ({location}{headline!r})"
        super().__init__(message)
        self.headline = headline
        self.line_number = line_number


class DateFormatError(SyncError, ValueError):
    """Raised when a due date string is not a readable calendar date."""

    def __init__(self, value: Any):
        super().__init__(f"Unreadable due date: {value!r}")
        self.value = value


class PartialUploadFailure(SyncError):
    """Raised when one or more task creations failed during an upload."""

    def __init__(
        self,
        created: Sequence["CreatedTask"],
        failures: Sequence["UploadFailure"],
    ):
        self.created = list(created)
        self.failures = list(failures)
        details = "; ".join(
            f"{failure.content!r}: {failure.error}" for failure in self.failures
        )
        super().__init__(
            f"{len(self.failures)} of {len(self.created) + len(self.failures)} "
            f"task(s) could not be created: {details}"
        )


__all__ = [
    "SyncError",
    "RequestError",
    "MalformedOutline",
    "DateFormatError",
    "PartialUploadFailure",
]
