"""Upload ingestion pipeline."""

from __future__ import annotations

from .models import RawUpload, OperationOutcome, StoredFile
from .validator import (
    file_extension,
    is_safe_filename,
    AllowListPolicy,
    StaticAllowList,
    ExtensionValidator,
)
from .verifier import UploadVerifier, SpoolDirectoryVerifier
from .hooks import random_prefix_name, no_post_move
from .pipeline import UploadPipeline, normalize_uploads

__all__ = [
    "RawUpload",
    "OperationOutcome",
    "StoredFile",
    "file_extension",
    "is_safe_filename",
    "AllowListPolicy",
    "StaticAllowList",
    "ExtensionValidator",
    "UploadVerifier",
    "SpoolDirectoryVerifier",
    "random_prefix_name",
    "no_post_move",
    "UploadPipeline",
    "normalize_uploads",
]
