"""Inference plan builders.

An InferencePlan holds everything the command composer needs: mounts in
docker argument order, container file paths, the checkpoint and the demo
script flags. Plans are built fresh for each invocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from stereo_runner.core.config import Settings
from stereo_runner.core.constants import (
    ASSET_INTRINSIC_NAME,
    ASSET_LEFT_NAME,
    ASSET_RIGHT_NAME,
    CONTAINER_ASSETS_DIR,
    CONTAINER_OUTPUT_DIR,
    DEFAULT_GET_PC,
    DEFAULT_HIERA,
    DEFAULT_SCALE,
    DEFAULT_VALID_ITERS,
    DEFAULT_Z_FAR,
)
from stereo_runner.core.exceptions import ConfigurationError
from stereo_runner.core.logging import get_logger
from stereo_runner.planning.model_locator import CheckpointLocation, locate_checkpoint
from stereo_runner.planning.mounts import MountSpec, ResolvedFile, resolve_mount_plan

logger = get_logger(__name__)


@dataclass(frozen=True)
class InferenceParams:
    """Numeric flags of run_demo.py."""

    scale: float = DEFAULT_SCALE
    hiera: int = DEFAULT_HIERA
    valid_iters: int = DEFAULT_VALID_ITERS
    get_pc: int = DEFAULT_GET_PC
    z_far: float = DEFAULT_Z_FAR

    @classmethod
    def from_settings(cls, settings: Settings) -> InferenceParams:
        return cls(
            scale=settings.scale,
            hiera=settings.hiera,
            valid_iters=settings.valid_iters,
            get_pc=settings.get_pc,
            z_far=settings.z_far,
        )

    def to_args(self) -> list[str]:
        return [
            "--scale", str(float(self.scale)),
            "--hiera", str(self.hiera),
            "--valid_iters", str(self.valid_iters),
            "--get_pc", str(self.get_pc),
            "--z_far", str(float(self.z_far)),
        ]


@dataclass(frozen=True)
class InferencePlan:
    """Mounts, container paths and flags for one container run.

    Attributes:
        mounts: All bind mounts in the order they are passed to docker.
        left: Container path of the left image.
        right: Container path of the right image.
        intrinsic: Container path of the intrinsics file.
        checkpoint: Resolved checkpoint location.
        host_output_dir: Host directory mounted at /app/output.
        params: Demo script flags.
    """

    mounts: tuple[MountSpec, ...]
    left: ResolvedFile
    right: ResolvedFile
    intrinsic: ResolvedFile
    checkpoint: CheckpointLocation
    host_output_dir: Path
    params: InferenceParams = field(default_factory=InferenceParams)
    out_dir: str = CONTAINER_OUTPUT_DIR

    def __post_init__(self) -> None:
        targets = [m.container_directory for m in self.mounts]
        if len(targets) != len(set(targets)):
            msg = f"Duplicate container mount targets: {targets}"
            raise ValueError(msg)


def _output_mount(output_dir: Path) -> MountSpec:
    return MountSpec(output_dir, CONTAINER_OUTPUT_DIR, read_only=False)


def _prepare_output_dir(output_dir: str | Path) -> Path:
    path = Path(output_dir).expanduser()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Cannot create output directory: {path} ({e.strerror})"
        raise ConfigurationError(msg, setting="output_dir") from e
    resolved = path.resolve()
    logger.info("output_directory", path=str(resolved))
    return resolved


def _locate(settings: Settings) -> CheckpointLocation:
    return locate_checkpoint(
        settings.resolve_pretrained_dir(),
        checkpoint_name=settings.checkpoint_name,
        default_subdir=settings.default_model_subdir,
    )


def build_custom_plan(
    left: str | Path,
    right: str | Path,
    settings: Settings,
    intrinsic: str | Path | None = None,
    output_dir: str | Path | None = None,
) -> InferencePlan:
    """Plan inference for a user supplied stereo pair.

    Mount order: input, input2, intrinsic, pretrained_models, output.

    Raises:
        RequiredInputMissingError: If the left or right image is missing.
        ConfigurationError: If the output directory cannot be created.
    """
    mount_plan = resolve_mount_plan(left, right, intrinsic)
    host_output_dir = _prepare_output_dir(output_dir or settings.resolve_output_dir())
    checkpoint = _locate(settings)

    mounts = list(mount_plan.mounts)
    if checkpoint.uses_host_model:
        mounts.append(checkpoint.mount)
    mounts.append(_output_mount(host_output_dir))

    return InferencePlan(
        mounts=tuple(mounts),
        left=mount_plan.left,
        right=mount_plan.right,
        intrinsic=mount_plan.intrinsic,
        checkpoint=checkpoint,
        host_output_dir=host_output_dir,
        params=InferenceParams.from_settings(settings),
    )


def build_asset_plan(settings: Settings) -> InferencePlan:
    """Plan inference on the bundled demo assets.

    The host assets directory is mounted at /app/input_assets. Missing
    left.png or right.png only logs a warning, matching the bundled flow.

    Mount order: pretrained_models, input_assets, output.
    """
    assets_dir = settings.resolve_assets_dir()
    missing = [
        name for name in (ASSET_LEFT_NAME, ASSET_RIGHT_NAME)
        if not (assets_dir / name).is_file()
    ]
    if missing:
        logger.warning(
            "test_images_missing",
            assets_dir=str(assets_dir),
            expected=[ASSET_LEFT_NAME, ASSET_RIGHT_NAME],
            missing=missing,
        )

    host_output_dir = _prepare_output_dir(settings.resolve_output_dir())
    checkpoint = _locate(settings)

    assets = MountSpec(assets_dir.absolute(), CONTAINER_ASSETS_DIR)
    mounts: list[MountSpec] = []
    if checkpoint.uses_host_model:
        mounts.append(checkpoint.mount)
    mounts.append(assets)
    mounts.append(_output_mount(host_output_dir))

    return InferencePlan(
        mounts=tuple(mounts),
        left=ResolvedFile.under(assets, ASSET_LEFT_NAME),
        right=ResolvedFile.under(assets, ASSET_RIGHT_NAME),
        intrinsic=ResolvedFile.under(assets, ASSET_INTRINSIC_NAME),
        checkpoint=checkpoint,
        host_output_dir=host_output_dir,
        params=InferenceParams.from_settings(settings),
    )
