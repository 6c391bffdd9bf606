"""
logging.py - Global logging configuration

Structured logging with ANSI colors on stderr:
- Color-coded log levels (DEBUG=gray, INFO=green, WARNING=yellow, ERROR=red)
- Logger name visible
- Structured key=value pairs rendered after the message

Example output:
    2024-01-21 10:30:45 [DEBUG   ] yrun.core.aggregator: Aggregated scripts manifests=3 entries=17

Usage:
    from yrun.config.logging import configure_logging, get_logger
    configure_logging(level="INFO")
    logger = get_logger("yrun.core")
    logger.info("Starting...", root="/repo")
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import Any

import structlog

# =============================================================================
# ANSI Color Codes
# =============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"

    DIM = "\033[2m"
    BOLD = "\033[1m"
    REVERSE = "\033[7m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"

    BRIGHT_BLACK = "\033[90m"


LOG_COLORS = {
    "DEBUG": f"{Colors.BRIGHT_BLACK}{Colors.DIM}",
    "INFO": Colors.GREEN,
    "WARNING": Colors.YELLOW,
    "ERROR": f"{Colors.RED}{Colors.BOLD}",
    "CRITICAL": f"{Colors.RED}{Colors.BOLD}{Colors.REVERSE}",
}

RESET = Colors.RESET

_RESERVED_KEYS = ("logger", "logger_name", "event", "level", "timestamp", "_colors")


# =============================================================================
# Formatter
# =============================================================================


def format_log(
    _logger: Any,
    _method_name: str,
    event_dict: dict[str, Any],
) -> str:
    """Render a structlog event dict into one line.

    Args:
        _logger: The logger instance (unused)
        _method_name: The log method name (info, error, etc.)
        event_dict: The event dictionary containing event and other data

    Returns:
        Formatted log string, with ANSI colors when enabled
    """
    colors = event_dict.pop("_colors", None)
    if colors is None:
        colors = _force_colors

    msg = event_dict.get("event", "")

    if not colors:
        return _format_plain(_method_name, msg, event_dict)
    return _format_rich(_method_name, msg, event_dict)


def _format_rich(level: str, msg: str, data: dict[str, Any]) -> str:
    level_upper = level.upper()
    color = LOG_COLORS.get(level_upper, "")
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    parts = [
        f"{Colors.BRIGHT_BLACK}{timestamp}{RESET}",
        f"{color}[{level_upper:<8}]{RESET}",
    ]

    logger_name = data.get("logger", "") or data.get("logger_name", "")
    if logger_name:
        parts.append(f"{Colors.CYAN}{logger_name}:{RESET}")

    parts.append(str(msg))

    for key, value in data.items():
        if key in _RESERVED_KEYS:
            continue
        parts.append(f"{Colors.MAGENTA}{key}={RESET}{Colors.GREEN}{value}{RESET}")

    return " ".join(parts)


def _format_plain(level: str, msg: str, data: dict[str, Any]) -> str:
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    level_upper = level.upper()

    parts = [f"{timestamp} [{level_upper:<8}]"]

    logger_name = data.get("logger", "") or data.get("logger_name", "")
    if logger_name:
        parts.append(f"{logger_name}:")
    parts.append(str(msg))

    extra = {k: v for k, v in data.items() if k not in _RESERVED_KEYS}
    if extra:
        parts.append(" ".join(f"{k}={v}" for k, v in extra.items()))

    return " ".join(parts)


# =============================================================================
# Safe Stream Handler
# =============================================================================


class _SafeStreamHandler(logging.StreamHandler):
    """StreamHandler that drops records once its stream has been closed.

    CliRunner and pytest capture swap stderr for short-lived streams that
    are closed after each invocation.
    """

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(self.stream, "closed", False):
            return
        super().emit(record)


# =============================================================================
# Configuration
# =============================================================================

_configured = False
_force_colors = False
_verbose_level = logging.WARNING


def configure_logging(
    level: str = "WARNING",
    colors: bool | None = None,
    verbose: bool = False,
    force: bool = False,
) -> None:
    """Configure global logging with structured output on stderr.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        colors: Enable ANSI colors. If None, auto-detect from TTY.
        verbose: Enable verbose mode (DEBUG level)
        force: Force reconfiguration even if already configured
    """
    global _configured, _force_colors, _verbose_level

    if _configured and not force:
        return

    log_level = getattr(logging, level.upper(), logging.WARNING)
    if verbose:
        log_level = logging.DEBUG
    _verbose_level = log_level

    if colors is None:
        colors = sys.stderr.isatty()
    _force_colors = colors

    # 1. Standard logging: a single stderr handler, message passthrough
    root_logger = logging.getLogger()
    root_logger.handlers = []

    stderr_handler = _SafeStreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(stderr_handler)
    root_logger.setLevel(log_level)

    # 2. Structlog renders the line, stdlib filters by level
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            format_log,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str = "yrun") -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name (usually the module path)
    """
    return structlog.get_logger(name)


def is_configured() -> bool:
    return _configured


def is_verbose() -> bool:
    """True if DEBUG level logging is enabled."""
    return _verbose_level <= logging.DEBUG


def get_log_level() -> str:
    """Current log level name: DEBUG, INFO, WARNING, ERROR."""
    return logging.getLevelName(_verbose_level)


__all__ = [
    "Colors",
    "configure_logging",
    "format_log",
    "get_log_level",
    "get_logger",
    "is_configured",
    "is_verbose",
]
