"""Tests for extension handling and upload validation."""

from __future__ import annotations

import pytest

from pyuploadhub.core.uploads import (
    AllowListPolicy,
    ExtensionValidator,
    StaticAllowList,
    UploadPipeline,
    file_extension,
    is_safe_filename,
)


@pytest.mark.parametrize("filename, expected", [
    ("Photo.JPG", "jpg"),
    ("noext", ""),
    ("archive.tar.gz", "gz"),
    ("trailing.", ""),
    (".hidden", "hidden"),
    ("Mixed.PdF", "pdf"),
])
def test_file_extension(filename, expected):
    assert file_extension(filename) == expected


def test_file_extension_on_pipeline():
    assert UploadPipeline.file_extension("Photo.JPG") == "jpg"


@pytest.mark.parametrize("filename, expected", [
    ("1234-photo.png", True),
    ("..hidden.png", True),
    ("../escape.png", False),
    ("sub\\escape.png", False),
    ("/etc/passwd", False),
    ("..", False),
    (".", False),
    ("", False),
    ("a\x00.png", False),
])
def test_is_safe_filename(filename, expected):
    assert is_safe_filename(filename) is expected


class TestStaticAllowList:

    def test_normalizes_case_and_dots(self):
        assert StaticAllowList([".PNG", "jpg"]).allowed_file_types() == ["png", "jpg"]

    def test_is_an_allow_list_policy(self):
        assert isinstance(StaticAllowList([]), AllowListPolicy)


class TestExtensionValidator:

    def test_case_insensitive(self):
        validator = ExtensionValidator(StaticAllowList(["png"]))
        assert validator.is_allowed("A.PNG")
        assert not validator.is_allowed("a.gif")

    def test_policy_without_list_allows_nothing(self):
        class EmptyPolicy:
            def allowed_file_types(self):
                return None

        assert not ExtensionValidator(EmptyPolicy()).is_allowed("a.png")


class ModelPolicy:
    """Stand-in for a model class that declares its own file types."""

    def __init__(self, types):
        self.types = types

    def allowed_file_types(self):
        return self.types


class TestValidateUploads:

    def test_no_files_uploaded(self, pipeline):
        assert pipeline.validate_uploads({"name": "", "tmp_name": ""}) == (True, "No files uploaded")
        assert pipeline.validate_uploads({"name": ["", ""], "tmp_name": ["", ""]}) == (
            True, "No files uploaded")

    def test_counts_files_without_policy(self, pipeline):
        files = {"name": ["a.exe", "b.png"], "tmp_name": ["/tmp/1", "/tmp/2"]}
        assert pipeline.validate_uploads(files) == (True, "2 file(s) validated")

    def test_first_violation_is_reported(self, pipeline):
        files = {"name": ["a.png", "b.EXE", "c.sh"], "tmp_name": ["/tmp/1", "/tmp/2", "/tmp/3"]}

        outcome = pipeline.validate_uploads(files, ModelPolicy(["png"]))

        assert outcome == (False, 'File extension "exe" is not supported')

    def test_all_allowed(self, pipeline):
        files = {"name": ["a.png", "b.JPG"], "tmp_name": ["/tmp/1", "/tmp/2"]}
        assert pipeline.validate_uploads(files, ModelPolicy(["png", "JPG"])) == (
            True, "2 file(s) validated")

    def test_policy_with_empty_list_is_skipped(self, pipeline):
        files = {"name": "a.exe", "tmp_name": "/tmp/1"}
        assert pipeline.validate_uploads(files, ModelPolicy([])) == (True, "1 file(s) validated")

    def test_policy_without_allow_list_method_is_skipped(self, pipeline):
        class ModelWithoutTypes:
            pass

        files = {"name": "a.exe", "tmp_name": "/tmp/1"}
        assert pipeline.validate_uploads(files, ModelWithoutTypes()) == (
            True, "1 file(s) validated")

    def test_single_file_upload(self, pipeline):
        files = {"name": "a.exe", "tmp_name": "/tmp/1"}
        assert pipeline.validate_uploads(files, StaticAllowList(["png"])) == (
            False, 'File extension "exe" is not supported')
