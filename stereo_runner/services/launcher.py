"""Launcher service: image check, container run and result listing.

Reference flow for one invocation:
    1. ensure_image()          -> ImageNotFoundError if absent
    2. build_*_plan()          -> InferencePlan (done by the caller)
    3. execute(plan)           -> ContainerExecutionError on non-zero exit
    4. collect_outputs(plan)   -> files written to the host output directory
"""

from __future__ import annotations

from stereo_runner.core.config import Settings
from stereo_runner.core.exceptions import ContainerExecutionError, ImageNotFoundError
from stereo_runner.core.logging import get_logger
from stereo_runner.docker.client import DockerClient
from stereo_runner.docker.command import DockerRunOptions, compose_run_command
from stereo_runner.planning.plan import InferencePlan
from stereo_runner.services.output import OutputFile, list_output_files

logger = get_logger(__name__)


class StereoLauncher:
    """Runs an InferencePlan inside the FoundationStereo image.

    Attributes:
        settings: Launcher settings.
        client: Docker CLI wrapper.
        options: Container options derived from settings.
    """

    def __init__(self, settings: Settings, client: DockerClient | None = None) -> None:
        self.settings = settings
        self.client = client or DockerClient(settings.docker_binary)
        self.options = DockerRunOptions.from_settings(settings)

    def ensure_image(self) -> None:
        """Fail fast when the image has not been built or pulled.

        Raises:
            ImageNotFoundError: If the image is not present locally.
        """
        if not self.client.image_exists(self.settings.image_name):
            raise ImageNotFoundError(self.settings.image_name)
        logger.info("docker_image_found", image=self.settings.image_name)

    def command_for(self, plan: InferencePlan) -> list[str]:
        return compose_run_command(plan, self.options)

    def execute(self, plan: InferencePlan) -> int:
        """Run the container for ``plan`` and wait for it.

        Returns:
            0 on success.

        Raises:
            ContainerExecutionError: If the container exits non-zero.
        """
        exit_code = self.client.run(self.command_for(plan))
        if exit_code != 0:
            raise ContainerExecutionError(exit_code)
        logger.info("inference_complete", output_dir=str(plan.host_output_dir))
        return exit_code

    def collect_outputs(self, plan: InferencePlan) -> list[OutputFile]:
        return list_output_files(plan.host_output_dir)
