"""Structured logging module for stereo-runner.

Provides structured logging using structlog, rendered either for a terminal
or as JSON lines.

Patterns applied:
- Singleton _configured flag prevents reconfiguration
- configure_logging() called ONCE per CLI invocation
- Underscore-prefix for unused structlog params
- Invocation ID support via contextvars
"""

import contextvars
import sys
from typing import Any, TextIO

import structlog
from structlog.types import EventDict


# =============================================================================
# Singleton Configuration State
# =============================================================================
_configured: bool = False


# =============================================================================
# Invocation ID Context (one per CLI run)
# =============================================================================
_invocation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "invocation_id", default=None
)


def set_invocation_id(invocation_id: str) -> None:
    """Set invocation ID for the current context.

    Args:
        invocation_id: Unique identifier of this launcher run.
    """
    _invocation_id_var.set(invocation_id)


def get_invocation_id() -> str | None:
    return _invocation_id_var.get()


# =============================================================================
# Custom Processors
# =============================================================================
def add_invocation_id(
    _logger: object, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add invocation ID to log event if set.

    Args:
        _logger: Logger instance (unused - required by structlog interface).
        _method_name: Method name (unused).
        event_dict: Event dictionary to process.

    Returns:
        Event dictionary with invocation_id added if set.
    """
    invocation_id = get_invocation_id()
    if invocation_id is not None:
        event_dict["invocation_id"] = invocation_id
    return event_dict


def _level_to_int(level: str) -> int:
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# =============================================================================
# Singleton Configuration
# =============================================================================
def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    force: bool = False,
    json_format: bool = False,
) -> None:
    """Configure structlog ONCE per process.

    Subsequent calls are no-ops unless force=True (for testing).

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Output stream. Defaults to sys.stderr so container output
            on stdout stays clean.
        force: Force reconfiguration (for testing only).
        json_format: Render JSON lines instead of console output.
    """
    global _configured

    if _configured and not force:
        return

    renderer: structlog.types.Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        add_invocation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )

    _configured = True


def reset_logging() -> None:
    """Reset configuration state for test isolation."""
    global _configured
    _configured = False


def get_logger(name: str) -> Any:
    """Get configured logger by name.

    Auto-configures with defaults if not already configured. The returned
    proxy resolves the configuration on every call, so module-level loggers
    follow a later configure_logging(force=True).

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Lazy structlog logger with logger_name bound.
    """
    configure_logging()  # No-op if already configured
    return structlog.get_logger(logger_name=name)
