"""Upload pipeline: normalize, validate, store and remove uploaded files."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Any, Mapping

from pyuploadhub.config.settings import UploadSettings, get_config_manager
from pyuploadhub.logging.setup import get_logger
from pyuploadhub.core.storage import FileSystemBackend, LocalFileSystem, PathStore
from .hooks import NameHook, PostMoveHook, no_post_move, random_prefix_name
from .models import OperationOutcome, RawUpload, StoredFile
from .validator import (
    AllowListPolicy,
    ExtensionValidator,
    StaticAllowList,
    file_extension,
    is_safe_filename,
)
from .verifier import SpoolDirectoryVerifier, UploadVerifier

logger = get_logger(__name__)

Timestamp = int | float | str | datetime | None


def normalize_uploads(
    files: Mapping[str, Any],
    ignore_blank: bool = False,
    input_name: str = "name",
) -> list[RawUpload]:
    """
    Turn raw upload fields into a list of RawUpload records.

    A multiple-file upload arrives as parallel lists
    (``{"name": [...], "tmp_name": [...]}``) and is transposed index by
    index. A single-file upload (scalar ``name``) becomes one record
    holding the whole mapping.

    Args:
        files: Raw upload field mapping
        ignore_blank: Skip entries whose primary field is empty
        input_name: Field used to detect blanks and multiple uploads

    Returns:
        Records in input order
    """
    primary = files.get(input_name)

    if ignore_blank and not primary:
        return []

    if not isinstance(primary, (list, tuple)):
        return [RawUpload.from_mapping(files)]

    uploaded_files = []
    for index, value in enumerate(primary):
        if ignore_blank and not value:
            continue

        record = {}
        for key, values in files.items():
            if isinstance(values, (list, tuple)) and index < len(values):
                record[key] = values[index]
            else:
                record[key] = None
        uploaded_files.append(RawUpload.from_mapping(record))

    return uploaded_files


class UploadPipeline:
    """
    Stores uploaded files in a date-sharded tree under ``base_path``.

    Business policy is injected rather than hard-coded:
    - allow_list: which extensions are accepted
    - name_hook: how the stored filename is derived
    - post_move: what happens once a file is stored (e.g. a DB insert)

    Every public operation returns an OperationOutcome for ordinary
    failures. Only PathCreationError propagates.
    """

    def __init__(
        self,
        settings: UploadSettings | None = None,
        filesystem: FileSystemBackend | None = None,
        path_store: PathStore | None = None,
        verifier: UploadVerifier | None = None,
        allow_list: AllowListPolicy | None = None,
        name_hook: NameHook | None = None,
        post_move: PostMoveHook | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Upload settings (defaults to UploadSettings())
            filesystem: Filesystem backend (defaults to LocalFileSystem)
            path_store: Directory resolver (built from settings if omitted)
            verifier: Upload-channel verifier (spool directories from settings)
            allow_list: Extension policy (settings.allowed_file_types)
            name_hook: Target filename builder (random numeric prefix)
            post_move: Called with (target_path, additional_data) after storing
        """
        self.settings = settings or UploadSettings()
        self.filesystem = filesystem or LocalFileSystem()
        self.path_store = path_store or PathStore(
            self.filesystem,
            web_user=self.settings.web_user,
            web_group=self.settings.web_group,
        )
        self.verifier = verifier or SpoolDirectoryVerifier(self.settings.spool_dirs)
        self.allow_list = allow_list or StaticAllowList(self.settings.allowed_file_types)
        self.validator = ExtensionValidator(self.allow_list)
        self.name_hook = name_hook or random_prefix_name
        self.post_move = post_move or no_post_move
        self.base_path = os.path.join(self.settings.base_path, "")

    @classmethod
    def from_config(cls, **overrides: Any) -> UploadPipeline:
        """Build a pipeline from the loaded application configuration."""
        config_manager = get_config_manager()
        return cls(config_manager.upload_settings, **overrides)

    normalize_uploads = staticmethod(normalize_uploads)
    file_extension = staticmethod(file_extension)

    def storage_path(
        self,
        timestamp: Timestamp = None,
        include_date_folder: bool = True,
    ) -> str:
        """
        Directory a file uploaded at timestamp is stored in.

        The directory is created (one level at a time) if missing.

        Args:
            timestamp: Chooses the date folder; falsy means now
            include_date_folder: Append the YYYY/MM/DD/ shard

        Returns:
            Directory path with trailing separator

        Raises:
            PathCreationError: If a directory level cannot be created
        """
        path = self.base_path
        if include_date_folder:
            path += self.path_store.resolve_date_shard(timestamp)
        return self.path_store.ensure_path(path)

    def locate(self, filename: str, timestamp: Timestamp = None) -> StoredFile:
        """Where filename lives (or would live) for an upload at timestamp."""
        directory = self.storage_path(timestamp)
        return StoredFile(
            directory=directory,
            filename=filename,
            exists=self.filesystem.exists(directory + filename),
        )

    def add_file(
        self,
        uploaded_file: RawUpload,
        additional_data: dict[str, Any] | None = None,
    ) -> OperationOutcome:
        """
        Store one uploaded file and run the post-move hook.

        Args:
            uploaded_file: The upload to store
            additional_data: Optional ``timestamp`` plus anything the hooks need

        Returns:
            (target_path, "Added file") on success, (False, reason) otherwise

        Raises:
            PathCreationError: If the storage directory cannot be created
        """
        additional_data = {} if additional_data is None else additional_data

        if not uploaded_file.tmp_name:
            return OperationOutcome.failure("File not uploaded")

        original_name = uploaded_file.name
        if not self.validator.is_allowed(original_name):
            logger.warning(
                f"Rejected upload {original_name!r}: extension "
                f"{file_extension(original_name)!r} not allowed")
            return OperationOutcome.failure("Unsupported file type")

        target_name = self.name_hook(original_name, additional_data)
        if not is_safe_filename(target_name):
            logger.warning(f"Rejected target name {target_name!r} for upload {original_name!r}")
            return OperationOutcome.failure("Failed to move file")

        timestamp = additional_data.get("timestamp")
        target_file_path = self.storage_path(timestamp) + target_name

        if uploaded_file.local_file:
            transfer = self.filesystem.copy
        elif self.verifier.is_genuine_upload(uploaded_file.tmp_name):
            transfer = self.filesystem.rename
        else:
            return OperationOutcome.failure("Not uploaded file")

        # Transfer errors are judged by whether the target exists afterwards
        try:
            transfer(uploaded_file.tmp_name, target_file_path)
        except OSError as e:
            logger.warning(
                f"Transfer of {uploaded_file.tmp_name} to {target_file_path} failed: {e}")

        if not self.filesystem.exists(target_file_path):
            return OperationOutcome.failure("Failed to move file")

        self.path_store.apply_ownership(target_file_path)
        self.post_move(target_file_path, additional_data)

        logger.info(f"Stored upload {original_name!r} at {target_file_path}")
        return OperationOutcome(target_file_path, "Added file")

    def add_files(
        self,
        files: Mapping[str, Any],
        additional_data: dict[str, Any] | None = None,
        ignore_blank: bool = True,
    ) -> list[OperationOutcome]:
        """Normalize a raw upload mapping and add every file in order."""
        return [
            self.add_file(uploaded_file, additional_data)
            for uploaded_file in normalize_uploads(files, ignore_blank)
        ]

    def remove_file(self, filename: str, timestamp: Timestamp = None) -> OperationOutcome:
        """
        Delete a stored file.

        Args:
            filename: Stored (generated) filename
            timestamp: Timestamp the file was added with

        Returns:
            (True, "File removed") or (False, reason)
        """
        if not is_safe_filename(filename):
            logger.warning(f"Refusing to remove {filename!r}: not a plain filename")
            return OperationOutcome.failure("Failed to remove file: Could not find file")

        stored = self.locate(filename, timestamp)

        if stored.exists:
            try:
                self.filesystem.unlink(stored.path)
            except OSError as e:
                logger.warning(f"Could not remove {stored.path}: {e}")
            else:
                logger.info(f"Removed stored file {stored.path}")
                return OperationOutcome(True, "File removed")

        return OperationOutcome.failure("Failed to remove file: Could not find file")

    def validate_uploads(
        self,
        files: Mapping[str, Any],
        source_policy: AllowListPolicy | None = None,
    ) -> OperationOutcome:
        """
        Check uploaded file types before storing anything.

        Args:
            files: Raw upload field mapping
            source_policy: Policy whose allow-list applies; no policy means
                every extension passes

        Returns:
            (True, summary) or (False, reason) for the first bad extension
        """
        uploaded_files = normalize_uploads(files, ignore_blank=True)
        if not uploaded_files:
            return OperationOutcome(True, "No files uploaded")

        # Policies without an allow-list accept every extension
        lookup = getattr(source_policy, "allowed_file_types", None)
        allowed_file_types = lookup() if callable(lookup) else None
        if allowed_file_types:
            allowed = {ext.lower() for ext in allowed_file_types}
            for uploaded_file in uploaded_files:
                extension = file_extension(uploaded_file.name)
                if extension not in allowed:
                    return OperationOutcome.failure(
                        f'File extension "{extension}" is not supported')

        return OperationOutcome(True, f"{len(uploaded_files)} file(s) validated")
