"""Exceptions raised by the storage layer."""

from __future__ import annotations


class UploadError(Exception):
    """Base class for hard failures in the upload pipeline."""
    pass


class PathCreationError(UploadError):
    """Raised when a directory level of the storage tree cannot be created."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        self.reason = reason
        message = f"Unable to create directory: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
