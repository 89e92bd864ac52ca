"""Core settings, constants, exceptions and logging for stereo-runner."""
