"""Mount planning for stereo-runner.

Modules:
- paths: host path normalization
- mounts: bind mount resolution for a stereo pair
- model_locator: host checkpoint discovery
- plan: InferencePlan builders for the custom and bundled-asset flows
"""

__all__: list[str] = []
