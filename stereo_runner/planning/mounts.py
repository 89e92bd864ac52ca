"""Mount plan resolution for stereo image pairs.

Decides which host directories have to be bind-mounted so that the left
image, the right image and an optional intrinsics file are all reachable
inside the container, using as few mounts as possible:

    same directory      -> /app/input
    different dirs      -> /app/input + /app/input2
    intrinsics elsewhere-> /app/intrinsic
    no intrinsics       -> /app/input_assets/K.txt (bundled, no mount)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from stereo_runner.core.constants import (
    CONTAINER_INPUT2_DIR,
    CONTAINER_INPUT_DIR,
    CONTAINER_INTRINSIC_DIR,
    CONTAINER_MOUNT_TARGETS,
    DEFAULT_CONTAINER_INTRINSIC,
)
from stereo_runner.core.exceptions import (
    ConfigurationError,
    PathNotFoundError,
    RequiredInputMissingError,
)
from stereo_runner.core.logging import get_logger
from stereo_runner.planning.paths import NormalizedPath, normalize_path

logger = get_logger(__name__)


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class MountSpec:
    """One bind mount of a host directory into the container."""

    host_directory: Path
    container_directory: str
    read_only: bool = True

    def __post_init__(self) -> None:
        if self.container_directory not in CONTAINER_MOUNT_TARGETS:
            msg = f"Unknown container mount target: {self.container_directory}"
            raise ValueError(msg)
        # docker -v splits on ":"
        if ":" in str(self.host_directory):
            msg = f"Host path cannot be bind-mounted, it contains ':': {self.host_directory}"
            raise ConfigurationError(msg)

    def to_volume_arg(self) -> str:
        """Render as the value of ``docker run -v``."""
        volume = f"{self.host_directory}:{self.container_directory}"
        return f"{volume}:ro" if self.read_only else volume


@dataclass(frozen=True)
class ResolvedFile:
    """A file as seen from inside the container."""

    container_path: str

    @classmethod
    def under(cls, mount: MountSpec, name: str) -> ResolvedFile:
        return cls(str(PurePosixPath(mount.container_directory) / name))

    def __str__(self) -> str:
        return self.container_path


@dataclass(frozen=True)
class MountPlan:
    """Input mounts plus the container paths of the three input files.

    Attributes:
        mounts: Input mounts in order /app/input, /app/input2, /app/intrinsic.
        left: Container path of the left image.
        right: Container path of the right image.
        intrinsic: Container path of the intrinsics file.
    """

    mounts: tuple[MountSpec, ...]
    left: ResolvedFile
    right: ResolvedFile
    intrinsic: ResolvedFile


# =============================================================================
# Resolver
# =============================================================================


def _normalize_required(role: str, path: str | Path) -> NormalizedPath:
    try:
        return normalize_path(path, required=True)
    except PathNotFoundError as e:
        raise RequiredInputMissingError(role, path) from e


def _normalize_optional(path: str | Path | None) -> NormalizedPath | None:
    if path is None or str(path) == "":
        return None
    try:
        return normalize_path(path, required=False)
    except PathNotFoundError:
        logger.warning(
            "optional_input_missing",
            input="intrinsic",
            path=str(path),
            fallback=DEFAULT_CONTAINER_INTRINSIC,
        )
        return None


def resolve_mount_plan(
    left: str | Path,
    right: str | Path,
    intrinsic: str | Path | None = None,
) -> MountPlan:
    """Resolve input mounts and container paths for a stereo pair.

    Args:
        left: Host path of the left image.
        right: Host path of the right image.
        intrinsic: Optional host path of the intrinsics file. A missing file
            is logged and replaced by the bundled default.

    Returns:
        MountPlan with at most three read-only input mounts.

    Raises:
        RequiredInputMissingError: If the left or right image does not exist.
        ConfigurationError: If a host directory cannot be used with ``-v``.
    """
    left_path = _normalize_required("left", left)
    right_path = _normalize_required("right", right)
    intrinsic_path = _normalize_optional(intrinsic)

    input_mount = MountSpec(left_path.directory, CONTAINER_INPUT_DIR)
    mounts = [input_mount]

    # One mount per distinct image directory
    if right_path.directory == left_path.directory:
        right_mount = input_mount
    else:
        right_mount = MountSpec(right_path.directory, CONTAINER_INPUT2_DIR)
        mounts.append(right_mount)

    if intrinsic_path is None:
        intrinsic_file = ResolvedFile(DEFAULT_CONTAINER_INTRINSIC)
    else:
        covering = next(
            (m for m in mounts if m.host_directory == intrinsic_path.directory),
            None,
        )
        if covering is None:
            covering = MountSpec(intrinsic_path.directory, CONTAINER_INTRINSIC_DIR)
            mounts.append(covering)
        intrinsic_file = ResolvedFile.under(covering, intrinsic_path.name)

    plan = MountPlan(
        mounts=tuple(mounts),
        left=ResolvedFile.under(input_mount, left_path.name),
        right=ResolvedFile.under(right_mount, right_path.name),
        intrinsic=intrinsic_file,
    )
    logger.debug(
        "mount_plan_resolved",
        mounts=[m.to_volume_arg() for m in plan.mounts],
        left=plan.left.container_path,
        right=plan.right.container_path,
        intrinsic=plan.intrinsic.container_path,
    )
    return plan
