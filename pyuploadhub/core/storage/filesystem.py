"""Filesystem primitives used by the storage tree and the upload pipeline."""

from __future__ import annotations

import os
import shutil
from abc import ABC, abstractmethod

from pyuploadhub.logging.setup import get_logger

logger = get_logger(__name__)


class FileSystemBackend(ABC):
    """
    Abstract filesystem backend.

    Implementations:
    - LocalFileSystem: operate on the local disk via os/shutil

    Ownership calls never raise; they report success as a boolean.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True if anything exists at path."""
        pass

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        """Return True if path is an existing directory."""
        pass

    @abstractmethod
    def copy(self, source: str, target: str) -> None:
        """
        Copy source to target, overwriting target.

        Raises:
            OSError: If the copy fails
        """
        pass

    @abstractmethod
    def rename(self, source: str, target: str) -> None:
        """
        Move source to target.

        Raises:
            OSError: If the move fails
        """
        pass

    @abstractmethod
    def unlink(self, path: str) -> None:
        """
        Delete the file at path.

        Raises:
            OSError: If the file cannot be removed
        """
        pass

    @abstractmethod
    def mkdir_level(self, path: str) -> bool:
        """
        Create a single directory level (parents must already exist).

        Returns:
            True if the directory was created, False if it already existed

        Raises:
            OSError: If the directory cannot be created
        """
        pass

    @abstractmethod
    def chown(self, path: str, user: str) -> bool:
        """Set the owner of path. Returns False instead of raising."""
        pass

    @abstractmethod
    def chgrp(self, path: str, group: str) -> bool:
        """Set the group of path. Returns False instead of raising."""
        pass


class LocalFileSystem(FileSystemBackend):
    """Local disk implementation of FileSystemBackend."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def copy(self, source: str, target: str) -> None:
        shutil.copyfile(source, target)

    def rename(self, source: str, target: str) -> None:
        # Spool directories may live on another device; shutil.move copies then deletes there
        shutil.move(source, target)

    def unlink(self, path: str) -> None:
        os.unlink(path)

    def mkdir_level(self, path: str) -> bool:
        try:
            os.mkdir(path)
        except FileExistsError:
            # Another writer created it first
            if os.path.isdir(path):
                return False
            raise
        return True

    def chown(self, path: str, user: str) -> bool:
        try:
            shutil.chown(path, user=user)
        except (OSError, LookupError) as e:
            logger.debug(f"Could not change owner of {path} to {user}: {e}")
            return False
        return True

    def chgrp(self, path: str, group: str) -> bool:
        try:
            shutil.chown(path, group=group)
        except (OSError, LookupError) as e:
            logger.debug(f"Could not change group of {path} to {group}: {e}")
            return False
        return True
