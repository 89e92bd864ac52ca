"""stereo-runner: Docker launcher for FoundationStereo inference.

This package plans bind mounts for stereo image pairs, locates a host
checkpoint and runs the model's demo script inside its Docker image.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
