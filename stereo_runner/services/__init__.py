"""Services for stereo-runner.

Services:
- launcher: image check, plan execution and result listing
- output: output directory listing
"""

__all__: list[str] = []
