"""Checkpoint discovery on the host.

A host ``pretrained_models`` directory overrides the checkpoint baked into
the image. When it holds no checkpoint the baked-in one is used and nothing
is mounted.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from stereo_runner.core.constants import (
    CONTAINER_PRETRAINED_DIR,
    DEFAULT_CHECKPOINT_NAME,
    DEFAULT_MODEL_SUBDIR,
)
from stereo_runner.core.logging import get_logger
from stereo_runner.planning.mounts import MountSpec

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckpointLocation:
    """Where the demo script should load its checkpoint from.

    Attributes:
        container_path: Checkpoint path passed as --ckpt_dir.
        model_subdir: Parent directory name of the checkpoint.
        host_root: Host pretrained models root to mount, or None when the
            baked-in checkpoint is used.
    """

    container_path: str
    model_subdir: str
    host_root: Path | None = None

    @property
    def uses_host_model(self) -> bool:
        return self.host_root is not None

    @property
    def mount(self) -> MountSpec | None:
        if self.host_root is None:
            return None
        return MountSpec(self.host_root, CONTAINER_PRETRAINED_DIR, read_only=True)


def find_checkpoints(root: Path, checkpoint_name: str = DEFAULT_CHECKPOINT_NAME) -> list[Path]:
    """Return every file named ``checkpoint_name`` under ``root``.

    Paths are sorted lexicographically so the first entry does not depend on
    directory listing order.
    """
    return sorted(p for p in root.rglob(checkpoint_name) if p.is_file())


def _container_checkpoint_path(subdir: str, checkpoint_name: str) -> str:
    return str(PurePosixPath(CONTAINER_PRETRAINED_DIR) / subdir / checkpoint_name)


def locate_checkpoint(
    host_root: Path | None,
    checkpoint_name: str = DEFAULT_CHECKPOINT_NAME,
    default_subdir: str = DEFAULT_MODEL_SUBDIR,
) -> CheckpointLocation:
    """Locate a checkpoint under the host pretrained models root.

    Args:
        host_root: Host directory to search, recursively. May be missing.
        checkpoint_name: Exact file name to look for.
        default_subdir: Subdirectory of the baked-in checkpoint.

    Returns:
        CheckpointLocation for the first match, or for the baked-in
        checkpoint when the root is missing or holds no match. Never raises
        for a missing model.
    """
    if host_root is not None and host_root.is_dir():
        matches = find_checkpoints(host_root, checkpoint_name)
        if matches:
            found = matches[0]
            subdir = found.parent.name
            if len(matches) > 1:
                logger.info(
                    "multiple_host_models",
                    selected=str(found),
                    candidates=[str(m) for m in matches],
                )
            logger.info("host_model_found", path=str(found))
            return CheckpointLocation(
                container_path=_container_checkpoint_path(subdir, checkpoint_name),
                model_subdir=subdir,
                host_root=host_root.resolve(),
            )

    location = CheckpointLocation(
        container_path=_container_checkpoint_path(default_subdir, checkpoint_name),
        model_subdir=default_subdir,
    )
    logger.info("using_baked_in_model", ckpt_dir=location.container_path)
    return location
