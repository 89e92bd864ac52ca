"""pytest configuration and fixtures for stereo-runner tests.

This module provides shared fixtures for unit tests. None of them need a
Docker daemon: docker calls are patched at the subprocess boundary.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from io import StringIO
from pathlib import Path

import pytest

from tests.helpers import INTRINSIC_NAME, LEFT_NAME, RIGHT_NAME, touch

# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (need a Docker daemon)")


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[StringIO, None, None]:
    """Clear STEREO_* variables, the settings cache and the log stream.

    Yields:
        StringIO receiving log output for the test.
    """
    from stereo_runner.core.config import get_settings
    from stereo_runner.core.logging import configure_logging, reset_logging

    for key in list(os.environ):
        if key.startswith("STEREO_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()

    stream = StringIO()
    reset_logging()
    configure_logging(level="DEBUG", stream=stream, force=True, json_format=True)

    yield stream

    get_settings.cache_clear()
    reset_logging()


@pytest.fixture
def log_stream(isolated_environment: StringIO) -> StringIO:
    """Log output captured for the current test."""
    return isolated_environment


# =============================================================================
# Filesystem Fixtures
# =============================================================================


@pytest.fixture
def shared_dir(tmp_path: Path) -> Path:
    """A directory holding left.png, right.png and K.txt."""
    directory = tmp_path / "shared"
    for name in (LEFT_NAME, RIGHT_NAME, INTRINSIC_NAME):
        touch(directory / name)
    return directory


@pytest.fixture
def split_dirs(tmp_path: Path) -> tuple[Path, Path]:
    """Left and right images in two different directories."""
    left_dir = tmp_path / "cam_left"
    right_dir = tmp_path / "cam_right"
    touch(left_dir / LEFT_NAME)
    touch(right_dir / RIGHT_NAME)
    return left_dir, right_dir


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty working directory."""
    directory = tmp_path / "work"
    directory.mkdir()
    monkeypatch.chdir(directory)
    return directory
