"""Unit tests for docker command composition."""

from __future__ import annotations

from pathlib import Path

import pytest

from stereo_runner.core.config import Settings
from stereo_runner.docker.command import (
    DockerRunOptions,
    compose_build_command,
    compose_run_command,
    format_command,
)
from stereo_runner.planning.model_locator import CheckpointLocation
from stereo_runner.planning.mounts import MountSpec, ResolvedFile
from stereo_runner.planning.plan import InferencePlan
from tests.helpers import TEST_IMAGE

CKPT = "/app/pretrained_models/23-51-11/model_best_bp2.pth"


@pytest.fixture
def plan() -> InferencePlan:
    """Two image mounts, a host model and the output directory."""
    return InferencePlan(
        mounts=(
            MountSpec(Path("/a"), "/app/input"),
            MountSpec(Path("/b"), "/app/input2"),
            MountSpec(Path("/models"), "/app/pretrained_models"),
            MountSpec(Path("/out"), "/app/output", read_only=False),
        ),
        left=ResolvedFile("/app/input/left.png"),
        right=ResolvedFile("/app/input2/right.png"),
        intrinsic=ResolvedFile("/app/input_assets/K.txt"),
        checkpoint=CheckpointLocation(CKPT, "23-51-11", host_root=Path("/models")),
        host_output_dir=Path("/out"),
    )


class TestComposeRunCommand:
    """docker run argv."""

    def test_full_command(self, plan: InferencePlan) -> None:
        argv = compose_run_command(plan, DockerRunOptions(image_name=TEST_IMAGE))

        assert argv == [
            "docker", "run",
            "--gpus", "device=0",
            "--network=host",
            "--shm-size=8g",
            "--rm",
            "-v", "/a:/app/input:ro",
            "-v", "/b:/app/input2:ro",
            "-v", "/models:/app/pretrained_models:ro",
            "-v", "/out:/app/output",
            "-e", "CUDA_VISIBLE_DEVICES=0",
            TEST_IMAGE,
            "python", "scripts/run_demo.py",
            "--left_file", "/app/input/left.png",
            "--right_file", "/app/input2/right.png",
            "--intrinsic_file", "/app/input_assets/K.txt",
            "--ckpt_dir", CKPT,
            "--out_dir", "/app/output",
            "--scale", "1.0",
            "--hiera", "0",
            "--valid_iters", "32",
            "--get_pc", "1",
            "--z_far", "10.0",
        ]

    def test_gpu_id_pins_both_flags(self, plan: InferencePlan) -> None:
        argv = compose_run_command(plan, DockerRunOptions(image_name=TEST_IMAGE, gpu_id=2))

        assert argv[argv.index("--gpus") + 1] == "device=2"
        assert "CUDA_VISIBLE_DEVICES=2" in argv

    def test_optional_runtime_flags_dropped(self, plan: InferencePlan) -> None:
        options = DockerRunOptions(
            image_name=TEST_IMAGE, host_network=False, remove_container=False
        )

        argv = compose_run_command(plan, options)

        assert "--network=host" not in argv
        assert "--rm" not in argv

    def test_path_with_spaces_stays_one_argument(self, plan: InferencePlan) -> None:
        spaced = InferencePlan(
            mounts=(MountSpec(Path("/data/my images"), "/app/input"),),
            left=ResolvedFile("/app/input/left image.png"),
            right=ResolvedFile("/app/input/right.png"),
            intrinsic=plan.intrinsic,
            checkpoint=plan.checkpoint,
            host_output_dir=plan.host_output_dir,
        )

        argv = compose_run_command(spaced, DockerRunOptions(image_name=TEST_IMAGE))

        assert "/data/my images:/app/input:ro" in argv
        assert "/app/input/left image.png" in argv

    def test_options_from_settings(self, plan: InferencePlan) -> None:
        settings = Settings(image_name=TEST_IMAGE, shm_size="16g", docker_binary="podman")

        argv = compose_run_command(plan, DockerRunOptions.from_settings(settings))

        assert argv[0] == "podman"
        assert "--shm-size=16g" in argv

    def test_deterministic(self, plan: InferencePlan) -> None:
        options = DockerRunOptions(image_name=TEST_IMAGE)
        assert compose_run_command(plan, options) == compose_run_command(plan, options)


class TestComposeBuildCommand:
    """docker build argv."""

    def test_host_network_build(self) -> None:
        assert compose_build_command("foundation_stereo", "docker") == [
            "docker", "build", "--network", "host", "-t", "foundation_stereo", "docker",
        ]

    def test_build_without_host_network(self) -> None:
        argv = compose_build_command("fs:dev", Path("/ctx"), network_host=False)
        assert argv == ["docker", "build", "-t", "fs:dev", "/ctx"]


class TestFormatCommand:
    """Display rendering quotes arguments with spaces."""

    def test_quotes_spaces(self) -> None:
        rendered = format_command(["docker", "run", "-v", "/my dir:/app/input:ro"])
        assert rendered == "docker run -v '/my dir:/app/input:ro'"
