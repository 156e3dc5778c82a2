"""
Pytest configuration and shared fixtures for setup-slotalk tests.
"""

import io
import logging
import tarfile
from pathlib import Path
from typing import Dict

import pytest


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


def _make_tar_gz(files: Dict[str, bytes]) -> bytes:
    """Build an in-memory .tar.gz holding the given relative paths."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


@pytest.fixture
def make_tar_gz():
    """Factory building .tar.gz bytes from a {path: content} mapping."""
    return _make_tar_gz


@pytest.fixture
def slotalk_archive() -> bytes:
    """Release archive with slotalk under bin/."""
    return _make_tar_gz(
        {
            "bin/slotalk": b"#!/bin/sh\necho slotalk\n",
            "LICENSE": b"MIT\n",
            "README.md": b"# slotalk\n",
        }
    )


@pytest.fixture
def cache_root(tmp_path) -> Path:
    """Empty tool cache root."""
    root = tmp_path / "tool-cache"
    root.mkdir()
    return root


@pytest.fixture
def isolated_env(monkeypatch):
    """Remove environment variables that leak host settings into tests."""
    for var in (
        "INPUT_VERSION",
        "SETUP_SLOTALK_VERSION",
        "SETUP_SLOTALK_CACHE_DIR",
        "SETUP_SLOTALK_RELEASES_BASE",
        "SETUP_SLOTALK_TIMEOUT",
        "SETUP_SLOTALK_LOCK_TIMEOUT",
        "RUNNER_TOOL_CACHE",
        "GITHUB_OUTPUT",
        "GITHUB_PATH",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from setup_slotalk.core import platform

    platform.clear_platform_cache()
    yield
    platform.clear_platform_cache()


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo root logger changes made by CLI and workflow entry points."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
