"""Storage tree for uploaded files."""

from __future__ import annotations

from .errors import UploadError, PathCreationError
from .filesystem import FileSystemBackend, LocalFileSystem
from .path_store import PathStore

__all__ = [
    "UploadError",
    "PathCreationError",
    "FileSystemBackend",
    "LocalFileSystem",
    "PathStore",
]
