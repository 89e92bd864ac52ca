"""Docker command composition.

Commands are built as argv lists and executed without a shell, so host paths
with spaces or quotes reach docker unchanged.
"""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from stereo_runner.core.config import Settings
from stereo_runner.planning.plan import InferencePlan


@dataclass(frozen=True)
class DockerRunOptions:
    """Container options that do not depend on the inputs."""

    image_name: str
    gpu_id: int = 0
    shm_size: str = "8g"
    host_network: bool = True
    remove_container: bool = True
    demo_script: str = "scripts/run_demo.py"
    docker_binary: str = "docker"

    @classmethod
    def from_settings(cls, settings: Settings) -> DockerRunOptions:
        return cls(
            image_name=settings.image_name,
            gpu_id=settings.gpu_id,
            shm_size=settings.shm_size,
            host_network=settings.host_network,
            remove_container=settings.remove_container,
            demo_script=settings.demo_script,
            docker_binary=settings.docker_binary,
        )


def compose_run_command(plan: InferencePlan, options: DockerRunOptions) -> list[str]:
    """Build the ``docker run`` argv for an inference plan.

    Order: runtime options, one ``-v`` per mount in plan order, the
    CUDA_VISIBLE_DEVICES pin, the image, then the demo script and its flags.
    """
    command = [
        options.docker_binary, "run",
        "--gpus", f"device={options.gpu_id}",
    ]
    if options.host_network:
        command.append("--network=host")
    command.append(f"--shm-size={options.shm_size}")
    if options.remove_container:
        command.append("--rm")

    for mount in plan.mounts:
        command.extend(["-v", mount.to_volume_arg()])

    command.extend(["-e", f"CUDA_VISIBLE_DEVICES={options.gpu_id}"])
    command.append(options.image_name)

    command.extend([
        "python", options.demo_script,
        "--left_file", plan.left.container_path,
        "--right_file", plan.right.container_path,
        "--intrinsic_file", plan.intrinsic.container_path,
        "--ckpt_dir", plan.checkpoint.container_path,
        "--out_dir", plan.out_dir,
    ])
    command.extend(plan.params.to_args())
    return command


def compose_build_command(
    tag: str,
    context_dir: str | Path,
    network_host: bool = True,
    docker_binary: str = "docker",
) -> list[str]:
    """Build the ``docker build`` argv for the inference image."""
    command = [docker_binary, "build"]
    if network_host:
        command.extend(["--network", "host"])
    command.extend(["-t", tag, str(context_dir)])
    return command


def format_command(argv: Sequence[str]) -> str:
    """Render argv as a copy-pasteable shell line (display only)."""
    return shlex.join(argv)
