"""Checks that a temporary file really came through the upload channel."""

from __future__ import annotations

import os
from typing import Iterable, Protocol, runtime_checkable

from pyuploadhub.logging.setup import get_logger

logger = get_logger(__name__)


@runtime_checkable
class UploadVerifier(Protocol):
    """Distinguishes upload-channel files from arbitrary local paths."""

    def is_genuine_upload(self, tmp_path: str) -> bool:
        ...


class SpoolDirectoryVerifier:
    """
    Accepts files the upload channel spooled into a known directory.

    A path qualifies when it is a regular file, is not a symlink, and its
    resolved location lies inside one of the spool directories. This stops
    callers from passing e.g. /etc/passwd as a temporary upload name and
    having it moved into public storage.
    """

    def __init__(self, spool_dirs: Iterable[str]):
        self.spool_dirs = [os.path.realpath(d) for d in spool_dirs]

    def is_genuine_upload(self, tmp_path: str) -> bool:
        if not tmp_path or os.path.islink(tmp_path):
            return False

        if not os.path.isfile(tmp_path):
            return False

        resolved = os.path.realpath(tmp_path)
        for spool_dir in self.spool_dirs:
            try:
                if os.path.commonpath([resolved, spool_dir]) == spool_dir:
                    return True
            except ValueError:
                # Different drives on Windows
                continue

        logger.warning(f"Rejected non-upload file outside spool directories: {tmp_path}")
        return False
