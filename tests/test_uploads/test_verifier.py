"""Tests for SpoolDirectoryVerifier."""

from __future__ import annotations

import os
import pytest

from pyuploadhub.core.uploads import SpoolDirectoryVerifier, UploadVerifier


@pytest.fixture
def verifier(spool_dir):
    return SpoolDirectoryVerifier([str(spool_dir)])


def test_file_in_spool_is_genuine(verifier, spooled_upload):
    assert verifier.is_genuine_upload(spooled_upload())


def test_file_outside_spool_is_rejected(verifier, tmp_path):
    outside = tmp_path / "elsewhere.png"
    outside.write_bytes(b"x")
    assert not verifier.is_genuine_upload(str(outside))


def test_traversal_out_of_spool_is_rejected(verifier, spool_dir, tmp_path):
    outside = tmp_path / "elsewhere.png"
    outside.write_bytes(b"x")
    assert not verifier.is_genuine_upload(os.path.join(str(spool_dir), "..", "elsewhere.png"))


def test_symlink_in_spool_is_rejected(verifier, spool_dir, tmp_path):
    target = tmp_path / "target.png"
    target.write_bytes(b"x")
    link = spool_dir / "link.png"
    link.symlink_to(target)
    assert not verifier.is_genuine_upload(str(link))


def test_directory_and_missing_paths_are_rejected(verifier, spool_dir):
    (spool_dir / "subdir").mkdir()
    assert not verifier.is_genuine_upload(str(spool_dir / "subdir"))
    assert not verifier.is_genuine_upload(str(spool_dir / "missing"))
    assert not verifier.is_genuine_upload("")


def test_is_an_upload_verifier(verifier):
    assert isinstance(verifier, UploadVerifier)
