"""File type checks against an extension allow-list."""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable


def file_extension(filename: str) -> str:
    """
    Lower-cased text after the last dot of filename.

    >>> file_extension("Photo.JPG")
    'jpg'
    >>> file_extension("noext")
    ''
    """
    lowered = filename.lower()
    if "." not in lowered:
        return ""
    return lowered.rsplit(".", 1)[1]


@runtime_checkable
class AllowListPolicy(Protocol):
    """Anything that can report which file extensions it accepts."""

    def allowed_file_types(self) -> list[str] | None:
        ...


class StaticAllowList:
    """Allow-list backed by a fixed collection of extensions."""

    def __init__(self, extensions: Iterable[str]):
        self.extensions = [ext.lower().lstrip(".") for ext in extensions]

    def allowed_file_types(self) -> list[str]:
        return list(self.extensions)

    def __repr__(self) -> str:
        return f"StaticAllowList({self.extensions!r})"


class ExtensionValidator:
    """Case-insensitive extension checks against an allow-list policy."""

    def __init__(self, policy: AllowListPolicy):
        self.policy = policy

    def allowed_extensions(self) -> set[str]:
        return {ext.lower() for ext in (self.policy.allowed_file_types() or [])}

    def is_allowed(self, filename: str) -> bool:
        return file_extension(filename) in self.allowed_extensions()


def is_safe_filename(filename: str) -> bool:
    """
    Whether filename is a single plain path component.

    Rejects empty names, ``.``/``..``, null bytes and anything containing a
    path separator, so joining it onto a storage directory cannot escape it.
    """
    if not filename or filename in (".", ".."):
        return False
    if "\x00" in filename:
        return False
    return "/" not in filename and "\\" not in filename
