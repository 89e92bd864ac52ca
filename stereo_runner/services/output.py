"""Output directory listing (the ``ls -lh`` step after inference)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

from stereo_runner.core.logging import get_logger

logger = get_logger(__name__)

_SIZE_UNITS = ("K", "M", "G", "T", "P")


@dataclass(frozen=True)
class OutputFile:
    """A file produced by the demo script."""

    name: str
    size_bytes: int

    @property
    def human_size(self) -> str:
        return format_size(self.size_bytes)


def format_size(size_bytes: int) -> str:
    """Format a byte count the way ``ls -h`` does.

    Values below 10 keep one decimal, larger values are whole numbers.
    Both round up.

    Example:
        >>> format_size(1536)
        '1.5K'
    """
    if size_bytes < 1024:
        return f"{size_bytes}B"

    value = float(size_bytes)
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS:
        value /= 1024
        if value < 1024:
            break

    tenths = math.ceil(value * 10) / 10
    if tenths < 10:
        return f"{tenths:.1f}{unit}"
    return f"{math.ceil(value)}{unit}"


def list_output_files(directory: Path) -> list[OutputFile]:
    """List regular files in ``directory`` sorted by name.

    A missing directory yields an empty list and a warning.
    """
    if not directory.is_dir():
        logger.warning("output_directory_missing", path=str(directory))
        return []

    return [
        OutputFile(name=entry.name, size_bytes=entry.stat().st_size)
        for entry in sorted(directory.iterdir(), key=lambda p: p.name)
        if entry.is_file()
    ]
