"""Core configuration module for stereo-runner.

Loads settings from STEREO_* prefixed environment variables using Pydantic Settings.

Patterns applied:
- pydantic-settings BaseSettings (Pydantic v2 split)
- env_prefix = "STEREO_" for namespace isolation
- @field_validator + @classmethod (Pydantic v2 pattern)
- @lru_cache for singleton pattern
- PEP 604 union syntax (X | None)
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from stereo_runner.core.constants import (
    DEFAULT_BUILD_CONTEXT,
    DEFAULT_CHECKPOINT_NAME,
    DEFAULT_DEMO_SCRIPT,
    DEFAULT_DOCKER_BINARY,
    DEFAULT_GET_PC,
    DEFAULT_GPU_ID,
    DEFAULT_HIERA,
    DEFAULT_IMAGE_NAME,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODEL_SUBDIR,
    DEFAULT_SCALE,
    DEFAULT_SHM_SIZE,
    DEFAULT_VALID_ITERS,
    DEFAULT_Z_FAR,
    HOST_ASSETS_DIRNAME,
    HOST_OUTPUT_DIRNAME,
    HOST_PRETRAINED_DIRNAME,
)

_SHM_SIZE_PATTERN = re.compile(r"^\d+[bkmg]?$", re.IGNORECASE)


class Settings(BaseSettings):
    """Launcher settings loaded from STEREO_* environment variables.

    All environment variables must be prefixed with STEREO_.
    Example: STEREO_GPU_ID=1, STEREO_IMAGE_NAME=foundation_stereo:dev

    Host directories left unset resolve against the current working
    directory at call time, so the same Settings instance follows `cd`.

    Attributes:
        image_name: Docker image name and tag.
        docker_binary: Docker executable name or path.
        gpu_id: GPU device index passed to --gpus and CUDA_VISIBLE_DEVICES.
        shm_size: Container shared memory size.
        host_network: Run the container with --network=host.
        remove_container: Run the container with --rm.
        pretrained_dir: Host directory searched for checkpoints.
        assets_dir: Host directory holding bundled demo assets.
        output_dir: Host directory receiving inference results.
        log_level: Logging verbosity. Default: INFO.
        log_format: Console (human) or JSON log lines.
    """

    # =========================================================================
    # Docker Settings
    # =========================================================================
    image_name: str = Field(
        default=DEFAULT_IMAGE_NAME,
        min_length=1,
        description="Docker image name and tag",
    )
    docker_binary: str = Field(
        default=DEFAULT_DOCKER_BINARY,
        min_length=1,
        description="Docker executable",
    )
    gpu_id: int = Field(
        default=DEFAULT_GPU_ID,
        ge=0,
        description="GPU device index",
    )
    shm_size: str = Field(
        default=DEFAULT_SHM_SIZE,
        description="Shared memory size for the container (e.g. 8g)",
    )
    host_network: bool = Field(
        default=True,
        description="Use host networking for the container",
    )
    remove_container: bool = Field(
        default=True,
        description="Remove the container after exit",
    )
    build_context: str = Field(
        default=DEFAULT_BUILD_CONTEXT,
        description="Directory holding the Dockerfile for stereo-build",
    )

    # =========================================================================
    # Host Paths
    # =========================================================================
    pretrained_dir: Path | None = Field(
        default=None,
        description="Host pretrained models root (default: ./pretrained_models)",
    )
    assets_dir: Path | None = Field(
        default=None,
        description="Host demo assets directory (default: ./assets)",
    )
    output_dir: Path | None = Field(
        default=None,
        description="Host output directory (default: ./output)",
    )

    # =========================================================================
    # Checkpoint Settings
    # =========================================================================
    checkpoint_name: str = Field(
        default=DEFAULT_CHECKPOINT_NAME,
        min_length=1,
        description="Checkpoint file name searched under pretrained_dir",
    )
    default_model_subdir: str = Field(
        default=DEFAULT_MODEL_SUBDIR,
        min_length=1,
        description="Subdirectory of the checkpoint baked into the image",
    )

    # =========================================================================
    # Inference Flags
    # =========================================================================
    demo_script: str = Field(
        default=DEFAULT_DEMO_SCRIPT,
        description="Inference script path inside the container",
    )
    scale: float = Field(default=DEFAULT_SCALE, gt=0.0, le=1.0)
    hiera: int = Field(default=DEFAULT_HIERA, ge=0, le=1)
    valid_iters: int = Field(default=DEFAULT_VALID_ITERS, ge=1)
    get_pc: int = Field(default=DEFAULT_GET_PC, ge=0, le=1)
    z_far: float = Field(default=DEFAULT_Z_FAR, gt=0.0)

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )

    # =========================================================================
    # Pydantic v2 Model Configuration
    # =========================================================================
    model_config = {
        "env_prefix": "STEREO_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    # =========================================================================
    # Validators (Pydantic v2 pattern: @field_validator + @classmethod)
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level to uppercase.

        Raises:
            ValueError: If log level is not valid.
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized not in valid_levels:
            msg = f"log_level must be one of {valid_levels}, got '{v}'"
            raise ValueError(msg)
        return normalized

    @field_validator("shm_size")
    @classmethod
    def validate_shm_size(cls, v: str) -> str:
        """Accept docker size strings such as 8g, 512m or 1073741824."""
        if not _SHM_SIZE_PATTERN.match(v):
            msg = f"shm_size must look like '8g', '512m' or a byte count, got '{v}'"
            raise ValueError(msg)
        return v.lower()

    # =========================================================================
    # Resolved Host Paths
    # =========================================================================
    def resolve_pretrained_dir(self) -> Path:
        return self.pretrained_dir or Path.cwd() / HOST_PRETRAINED_DIRNAME

    def resolve_assets_dir(self) -> Path:
        return self.assets_dir or Path.cwd() / HOST_ASSETS_DIRNAME

    def resolve_output_dir(self) -> Path:
        return self.output_dir or Path.cwd() / HOST_OUTPUT_DIRNAME


@lru_cache
def get_settings() -> Settings:
    """Get singleton Settings instance.

    Returns:
        Cached Settings instance.
    """
    return Settings()
