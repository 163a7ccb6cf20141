"""Shared pytest fixtures for daily-write tests."""

import tempfile

import pytest

from core.config import reload_config
from core.container import reset_container


@pytest.fixture(autouse=True)
def isolated_globals():
    """Each test starts with fresh configuration and no global container."""
    reset_container()
    reload_config()
    yield
    reset_container()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def env_override(monkeypatch):
    """Helper to override environment variables."""

    def _override(**kwargs):
        for key, value in kwargs.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)

    return _override
