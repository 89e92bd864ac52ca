"""Thin wrapper over the docker executable.

Every call is a single blocking subprocess. Nothing is retried: the exit
code of ``docker run`` becomes the launcher's exit code.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from stereo_runner.core.exceptions import DockerUnavailableError
from stereo_runner.core.logging import get_logger
from stereo_runner.docker.command import compose_build_command, format_command

logger = get_logger(__name__)


class DockerClient:
    """Runs docker CLI commands.

    Attributes:
        binary: Docker executable name or path.
    """

    def __init__(self, binary: str = "docker") -> None:
        self.binary = binary

    def _run(self, argv: Sequence[str], quiet: bool = False) -> int:
        kwargs = {}
        if quiet:
            kwargs = {"stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}
        try:
            completed = subprocess.run(list(argv), check=False, **kwargs)
        except FileNotFoundError as e:
            raise DockerUnavailableError(self.binary) from e
        except PermissionError as e:
            raise DockerUnavailableError(self.binary, reason="is not executable") from e
        return completed.returncode

    def image_exists(self, image_name: str) -> bool:
        """Check whether ``image_name`` is present locally."""
        exists = self._run([self.binary, "image", "inspect", image_name], quiet=True) == 0
        logger.debug("image_inspected", image=image_name, exists=exists)
        return exists

    def run(self, argv: Sequence[str]) -> int:
        """Run a composed ``docker run`` command with inherited stdio.

        Returns:
            Exit code of the container process.
        """
        logger.info("docker_run", command=format_command(argv))
        exit_code = self._run(argv)
        logger.info("docker_run_finished", exit_code=exit_code)
        return exit_code

    def build(self, tag: str, context_dir: str | Path, network_host: bool = True) -> int:
        """Build the inference image from ``context_dir``.

        Returns:
            Exit code of ``docker build``.
        """
        argv = compose_build_command(
            tag, context_dir, network_host=network_host, docker_binary=self.binary
        )
        logger.info("docker_build", command=format_command(argv))
        exit_code = self._run(argv)
        logger.info("docker_build_finished", tag=tag, exit_code=exit_code)
        return exit_code
