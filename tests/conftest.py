"""
Shared pytest fixtures for test suite.
"""

import pytest

from bucketize import Bucketizer
from bucketize import config_loader


@pytest.fixture
def reference_bucketizer():
    """The three-bucket set used throughout the README example."""
    return (
        Bucketizer()
        .add_bucket(10.0, 20.0, 15.0)
        .add_bucket(5.0, 10.0, 7.5)
        .add_bucket(None, 4.0, 0.0)
    )


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """
    Creates an isolated config directory.

    - Creates tmp_path/config/
    - Clears the loader cache before and after the test
    - Removes config env overrides
    """
    config_path = tmp_path / "config"
    config_path.mkdir()
    monkeypatch.delenv(config_loader.CONFIG_DIR_ENV, raising=False)
    monkeypatch.delenv(config_loader.STRICT_ENV, raising=False)
    config_loader.clear_cache()
    yield config_path
    config_loader.clear_cache()
