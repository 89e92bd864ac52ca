"""Command-line entry points for stereo-runner.

Entry points:
- stereo-infer: run inference on the bundled assets in ./assets
- stereo-infer-custom: run inference on a user supplied stereo pair
- stereo-build: build the inference image

Exit codes: 1 for launcher errors (missing image or inputs, bad config),
otherwise the exit code of the docker process. 130 on Ctrl-C.
"""

from __future__ import annotations

import argparse
import sys
import uuid
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from stereo_runner import __version__
from stereo_runner.core.config import Settings, get_settings
from stereo_runner.core.constants import ASSET_INTRINSIC_NAME, HOST_ASSETS_DIRNAME
from stereo_runner.core.exceptions import (
    ConfigurationError,
    ContainerExecutionError,
    FatalError,
    ImageNotFoundError,
)
from stereo_runner.core.logging import configure_logging, get_logger, set_invocation_id
from stereo_runner.docker.client import DockerClient
from stereo_runner.docker.command import format_command
from stereo_runner.planning.plan import InferencePlan, build_asset_plan, build_custom_plan
from stereo_runner.services.launcher import StereoLauncher
from stereo_runner.services.output import OutputFile

logger = get_logger(__name__)

EXIT_USAGE = 1
EXIT_INTERRUPTED = 130

BANNER = "=========================================="


# =============================================================================
# Shared helpers
# =============================================================================


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return number


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override STEREO_LOG_LEVEL",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")


def _add_run_arguments(parser: argparse.ArgumentParser) -> None:
    _add_common_arguments(parser)
    parser.add_argument("--image", default=None, help="Override STEREO_IMAGE_NAME")
    parser.add_argument(
        "--gpu-id",
        type=_non_negative_int,
        default=None,
        help="Override STEREO_GPU_ID",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the docker command instead of running it",
    )


def load_settings(**overrides: Any) -> Settings:
    """Load settings from the environment and apply CLI overrides.

    Raises:
        ConfigurationError: If the environment holds invalid values.
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid STEREO_* configuration: {e}") from e

    updates = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=updates) if updates else settings


def _start(settings: Settings, log_level: str | None) -> None:
    configure_logging(
        level=log_level or settings.log_level,
        json_format=settings.log_format == "json",
        force=True,
    )
    set_invocation_id(uuid.uuid4().hex[:12])


def _guard(action: Callable[[], int]) -> int:
    """Run ``action`` and map launcher errors to exit codes."""
    try:
        return action()
    except FatalError as e:
        logger.error(e.error_code.lower(), message=e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        if isinstance(e, ImageNotFoundError):
            print("Please build it first using: stereo-build", file=sys.stderr)
        return e.exit_code
    except ContainerExecutionError as e:
        logger.error("container_execution_failed", exit_code=e.exit_code)
        return e.exit_code
    except KeyboardInterrupt:
        logger.warning("interrupted")
        return EXIT_INTERRUPTED


def _print_header(title: str) -> None:
    print()
    print(BANNER)
    print(title)
    print(BANNER)
    print()


def _print_outputs(plan: InferencePlan, files: list[OutputFile]) -> None:
    _print_header("Inference Complete!")
    print(f"Output saved to: {plan.host_output_dir}")
    print()
    print("Generated files:")
    for output in files:
        print(f"  {output.human_size:>6}  {output.name}")


def _run_plan(launcher: StereoLauncher, plan: InferencePlan, dry_run: bool) -> int:
    if dry_run:
        print(format_command(launcher.command_for(plan)))
        return 0

    _print_header("Running FoundationStereo Inference")
    exit_code = launcher.execute(plan)
    _print_outputs(plan, launcher.collect_outputs(plan))
    return exit_code


# =============================================================================
# stereo-infer
# =============================================================================


def build_assets_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stereo-infer",
        description=(
            "Run FoundationStereo inference on ./assets/left.png and "
            "./assets/right.png, writing results to ./output."
        ),
    )
    _add_run_arguments(parser)
    return parser


def main_assets(argv: Sequence[str] | None = None) -> int:
    args = build_assets_parser().parse_args(argv)

    def action() -> int:
        settings = load_settings(image_name=args.image, gpu_id=args.gpu_id)
        _start(settings, args.log_level)
        launcher = StereoLauncher(settings)
        if not args.dry_run:
            launcher.ensure_image()
        plan = build_asset_plan(settings)
        return _run_plan(launcher, plan, args.dry_run)

    return _guard(action)


# =============================================================================
# stereo-infer-custom
# =============================================================================


def build_custom_parser() -> argparse.ArgumentParser:
    default_intrinsic = Path.cwd() / HOST_ASSETS_DIRNAME / ASSET_INTRINSIC_NAME
    parser = argparse.ArgumentParser(
        prog="stereo-infer-custom",
        usage="%(prog)s <left_image> <right_image> [intrinsic_file] [output_dir]",
        description="Run FoundationStereo inference on a custom stereo pair.",
        epilog=(
            "Examples:\n"
            "  %(prog)s /path/to/left.png /path/to/right.png\n"
            "  %(prog)s /path/to/left.png /path/to/right.png /custom/K.txt\n"
            "  %(prog)s /path/to/left.png /path/to/right.png /custom/K.txt /custom/output"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help=(
            "left_image right_image [intrinsic_file (default: "
            f"{default_intrinsic})] [output_dir (default: ./output)]"
        ),
    )
    _add_run_arguments(parser)
    return parser


def main_custom(argv: Sequence[str] | None = None) -> int:
    parser = build_custom_parser()
    args = parser.parse_intermixed_args(argv)
    if len(args.paths) < 2:
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    left, right, *rest = args.paths
    intrinsic = rest[0] if rest else None
    output_dir = rest[1] if len(rest) > 1 else None
    ignored = rest[2:]

    def action() -> int:
        settings = load_settings(image_name=args.image, gpu_id=args.gpu_id)
        _start(settings, args.log_level)
        if ignored:
            logger.warning("extra_arguments_ignored", arguments=ignored)
        launcher = StereoLauncher(settings)
        if not args.dry_run:
            launcher.ensure_image()
        plan = build_custom_plan(
            left,
            right,
            settings,
            intrinsic=intrinsic or settings.resolve_assets_dir() / ASSET_INTRINSIC_NAME,
            output_dir=output_dir,
        )
        return _run_plan(launcher, plan, args.dry_run)

    return _guard(action)


# =============================================================================
# stereo-build
# =============================================================================


def build_image_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stereo-build",
        description="Build the FoundationStereo inference image.",
    )
    _add_common_arguments(parser)
    parser.add_argument("--tag", default=None, help="Override STEREO_IMAGE_NAME")
    parser.add_argument(
        "--context",
        type=Path,
        default=None,
        help="Build context holding the Dockerfile (default: STEREO_BUILD_CONTEXT)",
    )
    parser.add_argument(
        "--no-host-network",
        action="store_true",
        help="Build without --network host",
    )
    return parser


def main_build(argv: Sequence[str] | None = None) -> int:
    args = build_image_parser().parse_args(argv)

    def action() -> int:
        settings = load_settings(image_name=args.tag)
        _start(settings, args.log_level)
        context = args.context or Path(settings.build_context)
        if not context.is_dir():
            raise ConfigurationError(
                f"Build context not found: {context}", setting="build_context"
            )
        client = DockerClient(settings.docker_binary)
        return client.build(
            settings.image_name, context, network_host=not args.no_host_network
        )

    return _guard(action)


# =============================================================================
# python -m stereo_runner <command>
# =============================================================================

COMMANDS: dict[str, Callable[[Sequence[str] | None], int]] = {
    "infer": main_assets,
    "infer-custom": main_custom,
    "build": main_build,
}


def main(argv: Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in COMMANDS:
        print(f"Usage: python -m stereo_runner {{{','.join(COMMANDS)}}} [args...]", file=sys.stderr)
        return EXIT_USAGE
    return COMMANDS[argv[0]](argv[1:])
