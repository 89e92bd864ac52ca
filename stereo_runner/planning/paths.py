"""Host path normalization.

Turns a user-supplied path into an absolute (directory, name) pair so the
mount resolver can compare directories and build container paths.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from stereo_runner.core.exceptions import PathNotFoundError


@dataclass(frozen=True)
class NormalizedPath:
    """An existing host file split into its absolute directory and base name."""

    directory: Path
    name: str


def normalize_path(path: str | Path, required: bool = True) -> NormalizedPath:
    """Resolve ``path`` to an absolute directory and file name.

    ``~`` is expanded and symlinks are followed, so the directory is the one
    that actually holds the file. The name is taken from the resolved file
    too: a symlink with a different name would otherwise point at a file
    that is not in the mounted directory.

    Args:
        path: Relative or absolute host path.
        required: Recorded on the raised error so callers can decide whether
            a missing file is fatal.

    Returns:
        NormalizedPath for the resolved file.

    Raises:
        PathNotFoundError: If the path is not an existing regular file.
    """
    candidate = Path(path).expanduser()
    if not candidate.is_file():
        raise PathNotFoundError(path, required=required)

    resolved = candidate.resolve()
    return NormalizedPath(directory=resolved.parent, name=resolved.name)
