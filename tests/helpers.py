"""Shared constants and filesystem helpers for stereo-runner tests."""

from __future__ import annotations

from pathlib import Path

# =============================================================================
# Constants (Avoid duplicated string literals)
# =============================================================================

LEFT_NAME = "left.png"
RIGHT_NAME = "right.png"
INTRINSIC_NAME = "K.txt"
CHECKPOINT_NAME = "model_best_bp2.pth"
TEST_IMAGE = "foundation_stereo:test"


def touch(path: Path, content: bytes = b"data") -> Path:
    """Create ``path`` and its parents with some content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path
