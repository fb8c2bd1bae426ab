"""Date-sharded directory resolution and ownership for stored files."""

from __future__ import annotations

import os
import re
import time
from datetime import datetime, timezone

from pyuploadhub.logging.setup import get_logger
from .errors import PathCreationError
from .filesystem import FileSystemBackend, LocalFileSystem

logger = get_logger(__name__)

# Accept either separator, mixed within one path
_SEPARATORS = re.compile(r"[\\/]")


def _to_utc_datetime(timestamp: int | float | str | datetime) -> datetime:
    """Convert an epoch timestamp, numeric string or datetime to UTC."""
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)
        return timestamp.astimezone(timezone.utc)
    return datetime.fromtimestamp(float(timestamp), tz=timezone.utc)


def _is_unset(timestamp: int | float | str | datetime | None) -> bool:
    """Falsy values and numeric strings equal to zero both mean "now"."""
    if not timestamp:
        return True
    if isinstance(timestamp, str):
        try:
            return float(timestamp) == 0
        except ValueError:
            return False
    return False


class PathStore:
    """
    Resolves and creates the on-disk directory tree for stored files.

    Directories are created one level at a time so that every new level
    can be handed to the configured owner/group. A recursive makedirs
    would leave intermediate levels owned by the running process.
    """

    def __init__(
        self,
        filesystem: FileSystemBackend | None = None,
        web_user: str | None = None,
        web_group: str | None = None,
    ):
        """
        Initialize the path store.

        Args:
            filesystem: Filesystem backend (defaults to LocalFileSystem)
            web_user: Owner to apply to new paths; None skips
            web_group: Group to apply to new paths; None skips
        """
        self.filesystem = filesystem or LocalFileSystem()
        self.web_user = web_user or None
        self.web_group = web_group or None

    @staticmethod
    def resolve_date_shard(
            timestamp: int | float | str | datetime | None = None) -> str:
        """
        Build the YYYY/MM/DD/ segment for a timestamp (UTC).

        Args:
            timestamp: Epoch seconds, numeric string or datetime; falsy or zero means now

        Returns:
            Relative directory, joined and terminated with os.sep
        """
        if _is_unset(timestamp):
            timestamp = time.time()

        moment = _to_utc_datetime(timestamp)
        return os.sep.join((
            moment.strftime("%Y"),
            moment.strftime("%m"),
            moment.strftime("%d"),
        )) + os.sep

    def ensure_path(self, path: str, base_path: str | None = None) -> str:
        """
        Make sure every directory of path exists.

        The last component of path is treated as a filename and is not
        created; pass a path ending in a separator to create all of it.

        Args:
            path: Path including the trailing filename component
            base_path: Prefix prepended to path, assumed to exist already

        Returns:
            The resolved directory (with trailing separator)

        Raises:
            PathCreationError: If a directory level cannot be created
        """
        segments = _SEPARATORS.split(path)
        segments.pop()

        directory = base_path or ""
        for segment in segments:
            directory += segment + os.sep
            if self.filesystem.is_dir(directory):
                continue

            try:
                created = self.filesystem.mkdir_level(directory)
            except OSError as e:
                logger.error(f"Unable to create directory {directory}: {e}")
                raise PathCreationError(directory, e.strerror) from e

            if created:
                logger.debug(f"Created directory {directory}")
                self.apply_ownership(directory)

        return directory

    def apply_ownership(self, path: str) -> bool:
        """
        Hand path to the configured owner and group.

        Failures are ignored by callers: a path left owned by the process
        identity is an accepted degraded state.

        Args:
            path: File or directory to update

        Returns:
            True if every attempted change succeeded
        """
        success = True

        if self.web_user:
            success = self.filesystem.chown(path, self.web_user) and success

        if self.web_group:
            success = self.filesystem.chgrp(path, self.web_group) and success

        return success
