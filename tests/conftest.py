"""
PyUploadHub test configuration.

Fixtures for:
- Isolated configuration and logging state
- Temporary storage roots and upload spool directories
- Ready-made upload pipelines
"""

import os
import pytest

from pyuploadhub.config.settings import ConfigManager, UploadSettings
from pyuploadhub.logging.setup import reset_logging
from pyuploadhub.core.uploads import UploadPipeline


@pytest.fixture(autouse=True)
def clear_env_vars(monkeypatch):
    """Keep PYUPLOADHUB_* variables from a developer shell out of the tests."""
    for var in list(os.environ):
        if var.startswith("PYUPLOADHUB_"):
            monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset config and logging singletons around every test."""
    ConfigManager.reset_instance()
    reset_logging()
    yield
    ConfigManager.reset_instance()
    reset_logging()


@pytest.fixture
def storage_root(tmp_path):
    """Root of the date-sharded tree."""
    root = tmp_path / "uploads"
    root.mkdir()
    return root


@pytest.fixture
def spool_dir(tmp_path):
    """Directory the upload channel writes temporary files to."""
    spool = tmp_path / "spool"
    spool.mkdir()
    return spool


@pytest.fixture
def upload_settings(storage_root, spool_dir):
    return UploadSettings(
        base_path=str(storage_root),
        allowed_file_types=["jpg", "jpeg", "png", "gif", "pdf"],
        spool_dirs=[str(spool_dir)],
    )


@pytest.fixture
def pipeline(upload_settings):
    return UploadPipeline(upload_settings)


@pytest.fixture
def spooled_upload(spool_dir):
    """Create a file in the spool directory as the upload channel would."""
    def _make(tmp_name="phpA1b2C3", content=b"uploaded bytes"):
        path = spool_dir / tmp_name
        path.write_bytes(content)
        return str(path)
    return _make
