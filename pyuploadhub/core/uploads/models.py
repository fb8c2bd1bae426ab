"""Data types passed through the upload pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Mapping


@dataclass
class RawUpload:
    """
    One uploaded file as described by the caller.

    Attributes:
        name: Original filename supplied by the client
        tmp_name: Temporary location of the file contents
        local_file: Source is an ordinary local file rather than a
            temporary file from the upload channel
        fields: Every field of the record as received (type, size, error...)
    """
    name: str = ""
    tmp_name: str = ""
    local_file: bool = False
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RawUpload:
        """Create from an upload field mapping (name, tmp_name, localFile...)."""
        local_file = data.get("localFile", data.get("local_file", False))
        return cls(
            name=data.get("name") or "",
            tmp_name=data.get("tmp_name") or "",
            local_file=bool(local_file),
            fields=dict(data),
        )


class OperationOutcome(NamedTuple):
    """
    Result of a pipeline operation.

    ``result`` is the stored path (or True) on success and False on
    failure; ``message`` is a human readable status.
    """
    result: str | bool
    message: str

    @property
    def ok(self) -> bool:
        return bool(self.result)

    @classmethod
    def failure(cls, message: str) -> OperationOutcome:
        return cls(False, message)


@dataclass
class StoredFile:
    """A file placed in the date-sharded storage tree."""
    directory: str
    filename: str
    exists: bool = False

    @property
    def path(self) -> str:
        return self.directory + self.filename

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "path": self.path,
            "directory": self.directory,
            "filename": self.filename,
            "exists": self.exists,
        }
