"""Custom exceptions for stereo-runner.

Exception Hierarchy:
    StereoRunnerError (base)
    ├── FatalError (abort the launcher with exit code 1)
    │   ├── ImageNotFoundError
    │   ├── RequiredInputMissingError
    │   ├── DockerUnavailableError
    │   └── ConfigurationError
    ├── ContainerExecutionError (propagates the container exit code)
    └── PathNotFoundError (raised by the path normalizer)

A missing intrinsics file is not an exception: the mount resolver logs an
``optional_input_missing`` warning and falls back to the bundled K.txt.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """Error codes for stereo-runner exceptions."""

    STEREO_RUNNER_ERROR = "STEREO_RUNNER_ERROR"

    # Fatal errors
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
    REQUIRED_INPUT_MISSING = "REQUIRED_INPUT_MISSING"
    DOCKER_UNAVAILABLE = "DOCKER_UNAVAILABLE"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Container and path errors
    CONTAINER_EXECUTION_FAILED = "CONTAINER_EXECUTION_FAILED"
    PATH_NOT_FOUND = "PATH_NOT_FOUND"


# =============================================================================
# Base Exception
# =============================================================================


class StereoRunnerError(Exception):
    """Base exception for all stereo-runner errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.STEREO_RUNNER_ERROR,
        **kwargs: Any,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )

        for key, value in kwargs.items():
            setattr(self, key, value)


class FatalError(StereoRunnerError):
    """Base class for errors that abort the launcher before docker run.

    The CLI reports the message and exits with ``exit_code`` (1).
    """

    exit_code: int = 1


# =============================================================================
# Fatal Exceptions
# =============================================================================


class ImageNotFoundError(FatalError):
    """The Docker image is not present locally.

    Attributes:
        image_name: Image name and tag that was inspected.
    """

    def __init__(self, image_name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Docker image '{image_name}' not found!",
            error_code=ErrorCode.IMAGE_NOT_FOUND,
            **kwargs,
        )
        self.image_name = image_name


class RequiredInputMissingError(FatalError):
    """A required input file (left or right image) does not exist.

    Attributes:
        role: Which input is missing ("left" or "right").
        path: The path as given by the user.
    """

    def __init__(self, role: str, path: str | Path, **kwargs: Any) -> None:
        super().__init__(
            f"{role.capitalize()} image not found: {path}",
            error_code=ErrorCode.REQUIRED_INPUT_MISSING,
            **kwargs,
        )
        self.role = role
        self.path = str(path)


class DockerUnavailableError(FatalError):
    """The docker executable could not be started.

    Attributes:
        binary: Executable that was looked up.
    """

    def __init__(
        self, binary: str, reason: str = "not found on PATH", **kwargs: Any
    ) -> None:
        super().__init__(
            f"Docker executable '{binary}' {reason}",
            error_code=ErrorCode.DOCKER_UNAVAILABLE,
            **kwargs,
        )
        self.binary = binary


class ConfigurationError(FatalError):
    """Launcher configuration is invalid.

    Attributes:
        setting: Name of the problematic setting.
    """

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            **kwargs,
        )
        self.setting = setting


# =============================================================================
# Container and Path Exceptions
# =============================================================================


class ContainerExecutionError(StereoRunnerError):
    """The container process exited non-zero.

    Not retried. The launcher exits with the same code.

    Attributes:
        exit_code: Exit code of the docker run process.
    """

    def __init__(self, exit_code: int, **kwargs: Any) -> None:
        super().__init__(
            f"Container exited with code {exit_code}",
            error_code=ErrorCode.CONTAINER_EXECUTION_FAILED,
            **kwargs,
        )
        self.exit_code = exit_code


class PathNotFoundError(StereoRunnerError):
    """A host path does not point at an existing file.

    Attributes:
        path: The path as given by the caller.
        required: Whether the caller treats the path as mandatory.
    """

    def __init__(self, path: str | Path, required: bool = True, **kwargs: Any) -> None:
        super().__init__(
            f"File not found: {path}",
            error_code=ErrorCode.PATH_NOT_FOUND,
            **kwargs,
        )
        self.path = str(path)
        self.required = required
