"""Docker command composition and execution for stereo-runner."""

from stereo_runner.docker.client import DockerClient
from stereo_runner.docker.command import (
    DockerRunOptions,
    compose_build_command,
    compose_run_command,
    format_command,
)

__all__ = [
    "DockerClient",
    "DockerRunOptions",
    "compose_build_command",
    "compose_run_command",
    "format_command",
]
