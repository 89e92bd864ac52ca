"""Container path constants for stereo-runner.

This module centralizes every container filesystem path the launcher mounts
into or passes to the demo script.

All paths are for the CONTAINER environment, not the host.
Host paths are configured via STEREO_* environment variables.

Container filesystem layout:
    /app/                         # WORKDIR of the FoundationStereo image
    /app/scripts/run_demo.py      # Inference entry point
    /app/input/                   # Left image directory (and right, if shared)
    /app/input2/                  # Right image directory when it differs
    /app/intrinsic/               # Intrinsics directory when not shared
    /app/input_assets/            # Bundled demo assets (left.png, right.png, K.txt)
    /app/pretrained_models/       # Checkpoints (baked in, or mounted from host)
    /app/output/                  # Results (mounted read-write from host)
"""

# =============================================================================
# Container Mount Targets
# =============================================================================
CONTAINER_INPUT_DIR = "/app/input"
CONTAINER_INPUT2_DIR = "/app/input2"
CONTAINER_INTRINSIC_DIR = "/app/intrinsic"
CONTAINER_ASSETS_DIR = "/app/input_assets"
CONTAINER_PRETRAINED_DIR = "/app/pretrained_models"
CONTAINER_OUTPUT_DIR = "/app/output"

CONTAINER_MOUNT_TARGETS = frozenset(
    {
        CONTAINER_INPUT_DIR,
        CONTAINER_INPUT2_DIR,
        CONTAINER_INTRINSIC_DIR,
        CONTAINER_ASSETS_DIR,
        CONTAINER_PRETRAINED_DIR,
        CONTAINER_OUTPUT_DIR,
    }
)


# =============================================================================
# Bundled Assets
# =============================================================================
ASSET_LEFT_NAME = "left.png"
ASSET_RIGHT_NAME = "right.png"
ASSET_INTRINSIC_NAME = "K.txt"

# Used whenever no intrinsics file is mounted
DEFAULT_CONTAINER_INTRINSIC = f"{CONTAINER_ASSETS_DIR}/{ASSET_INTRINSIC_NAME}"


# =============================================================================
# Checkpoint Defaults
# =============================================================================
DEFAULT_CHECKPOINT_NAME = "model_best_bp2.pth"
DEFAULT_MODEL_SUBDIR = "23-51-11"


# =============================================================================
# Launcher Defaults
# =============================================================================
DEFAULT_IMAGE_NAME = "xinjianwang/foundation_stereo:latest"
DEFAULT_DOCKER_BINARY = "docker"
DEFAULT_GPU_ID = 0
DEFAULT_SHM_SIZE = "8g"
DEFAULT_DEMO_SCRIPT = "scripts/run_demo.py"
DEFAULT_BUILD_CONTEXT = "docker"
DEFAULT_LOG_LEVEL = "INFO"

# Host directories, relative to the working directory
HOST_PRETRAINED_DIRNAME = "pretrained_models"
HOST_ASSETS_DIRNAME = "assets"
HOST_OUTPUT_DIRNAME = "output"


# =============================================================================
# Inference Flags
# =============================================================================
DEFAULT_SCALE = 1.0
DEFAULT_HIERA = 0
DEFAULT_VALID_ITERS = 32
DEFAULT_GET_PC = 1
DEFAULT_Z_FAR = 10.0
