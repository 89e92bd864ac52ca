"""Unit tests for StereoLauncher.

A MagicMock stands in for DockerClient so the launcher logic is tested
without subprocesses.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from stereo_runner.core.config import Settings
from stereo_runner.core.exceptions import ContainerExecutionError, ImageNotFoundError
from stereo_runner.docker.client import DockerClient
from stereo_runner.planning.plan import InferencePlan, build_custom_plan
from stereo_runner.services.launcher import StereoLauncher
from tests.helpers import LEFT_NAME, RIGHT_NAME, TEST_IMAGE, touch


@pytest.fixture
def client() -> MagicMock:
    mock = MagicMock(spec=DockerClient)
    mock.image_exists.return_value = True
    mock.run.return_value = 0
    return mock


@pytest.fixture
def settings() -> Settings:
    return Settings(image_name=TEST_IMAGE)


@pytest.fixture
def plan(shared_dir: Path, tmp_path: Path, settings: Settings, workdir: Path) -> InferencePlan:
    return build_custom_plan(
        shared_dir / LEFT_NAME,
        shared_dir / RIGHT_NAME,
        settings,
        output_dir=tmp_path / "out",
    )


class TestEnsureImage:
    """Image presence check."""

    def test_present(self, settings: Settings, client: MagicMock) -> None:
        StereoLauncher(settings, client).ensure_image()
        client.image_exists.assert_called_once_with(TEST_IMAGE)

    def test_absent_raises(self, settings: Settings, client: MagicMock) -> None:
        client.image_exists.return_value = False

        with pytest.raises(ImageNotFoundError) as exc_info:
            StereoLauncher(settings, client).ensure_image()

        assert exc_info.value.image_name == TEST_IMAGE


class TestExecute:
    """Container execution."""

    def test_success(
        self, settings: Settings, client: MagicMock, plan: InferencePlan
    ) -> None:
        launcher = StereoLauncher(settings, client)

        assert launcher.execute(plan) == 0

        argv = client.run.call_args.args[0]
        assert argv == launcher.command_for(plan)
        assert TEST_IMAGE in argv

    def test_failure_raises_with_exit_code(
        self, settings: Settings, client: MagicMock, plan: InferencePlan
    ) -> None:
        client.run.return_value = 3

        with pytest.raises(ContainerExecutionError) as exc_info:
            StereoLauncher(settings, client).execute(plan)

        assert exc_info.value.exit_code == 3
        client.run.assert_called_once()

    def test_collect_outputs(
        self, settings: Settings, client: MagicMock, plan: InferencePlan
    ) -> None:
        touch(plan.host_output_dir / "disp.png")

        files = StereoLauncher(settings, client).collect_outputs(plan)

        assert [f.name for f in files] == ["disp.png"]


class TestDefaultClient:
    """Without an explicit client the settings binary is used."""

    def test_uses_settings_binary(self) -> None:
        launcher = StereoLauncher(Settings(docker_binary="podman"))
        assert isinstance(launcher.client, DockerClient)
        assert launcher.client.binary == "podman"
