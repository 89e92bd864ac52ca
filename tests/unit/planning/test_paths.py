"""Unit tests for host path normalization."""

from __future__ import annotations

from pathlib import Path

import pytest

from stereo_runner.core.exceptions import PathNotFoundError
from stereo_runner.planning.paths import NormalizedPath, normalize_path
from tests.helpers import LEFT_NAME, touch


class TestNormalizePath:
    """normalize_path() splits an existing file into directory and name."""

    def test_absolute_path(self, tmp_path: Path) -> None:
        image = touch(tmp_path / "cam" / LEFT_NAME)

        result = normalize_path(image)

        assert result == NormalizedPath(directory=image.parent.resolve(), name=LEFT_NAME)
        assert result.directory.is_absolute()

    def test_relative_path_resolved_against_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        touch(tmp_path / "cam" / LEFT_NAME)
        monkeypatch.chdir(tmp_path)

        result = normalize_path(f"cam/{LEFT_NAME}")

        assert result.directory == (tmp_path / "cam").resolve()
        assert result.directory / result.name == (tmp_path / "cam" / LEFT_NAME).resolve()

    def test_dot_segments_collapse(self, tmp_path: Path) -> None:
        touch(tmp_path / "cam" / LEFT_NAME)

        result = normalize_path(tmp_path / "cam" / ".." / "cam" / LEFT_NAME)

        assert result.directory == (tmp_path / "cam").resolve()

    def test_symlink_followed_to_real_directory(self, tmp_path: Path) -> None:
        real = touch(tmp_path / "real" / "frame_0001.png")
        link_dir = tmp_path / "links"
        link_dir.mkdir()
        link = link_dir / LEFT_NAME
        link.symlink_to(real)

        result = normalize_path(link)

        assert result.directory == real.parent.resolve()
        assert result.name == "frame_0001.png"


class TestMissingPaths:
    """Missing files raise PathNotFoundError carrying the required flag."""

    def test_missing_required(self, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError) as exc_info:
            normalize_path(tmp_path / "nope.png")

        assert exc_info.value.required is True
        assert exc_info.value.path == str(tmp_path / "nope.png")

    def test_missing_optional(self, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError) as exc_info:
            normalize_path(tmp_path / "K.txt", required=False)

        assert exc_info.value.required is False

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError):
            normalize_path(tmp_path)
