"""Standardized logging for Chain Lightning.

Provides three output modes:
- Human mode: [LEVEL] message (colored if TTY)
- Verbose mode: [LEVEL][HH:MM:SS] logger: message
- CI/JSON mode: {"level":"...","ts":"...","logger":"...","msg":"..."}

Logs go to stderr by default: the CLI writes rendered HTML to stdout.
Render warnings carry their code and subject in ``extra_data``, which the
JSON formatter merges into the log line.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "chain_lightning"


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    GRAY = "\033[90m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.GRAY,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED,
}


def _is_tty(stream: TextIO | None = None) -> bool:
    """Check if the stream is a TTY (supports colors)."""
    if stream is None:
        stream = sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


class HumanFormatter(logging.Formatter):
    """Formatter for human-readable output.

    Format: [LEVEL] message
    """

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level_name = record.levelname

        if self.use_colors:
            color = LEVEL_COLORS.get(record.levelno, Colors.RESET)
            return f"{color}[{level_name}]{Colors.RESET} {record.getMessage()}"
        return f"[{level_name}] {record.getMessage()}"


class VerboseFormatter(logging.Formatter):
    """Formatter for verbose output with timestamps and logger names.

    Format: [LEVEL][HH:MM:SS] logger: message
    """

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level_name = record.levelname
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"[{timestamp}] {record.name}: {record.getMessage()}"

        if self.use_colors:
            color = LEVEL_COLORS.get(record.levelno, Colors.RESET)
            return f"{color}[{level_name}]{Colors.RESET}{line}"
        return f"[{level_name}]{line}"


class JSONFormatter(logging.Formatter):
    """Formatter for JSON lines output (machine-readable).

    Format: {"level":"WARNING","ts":"2026-01-31T19:45:23+00:00","logger":"...","msg":"..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }

        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            log_entry.update(extra_data)

        return json.dumps(log_entry)


def log_structured(
    logger: logging.Logger,
    level: int,
    msg: str,
    **kwargs: Any,
) -> None:
    """Log a message with additional structured data.

    Args:
        logger: Logger to emit on
        level: Log level
        msg: Log message
        **kwargs: Additional data to include in JSON output
    """
    logger.log(level, msg, extra={"extra_data": kwargs} if kwargs else None)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a Chain Lightning logger instance.

    Args:
        name: Logger name (defaults to the package root logger)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Configure the ``chain_lightning`` logger tree.

    Args:
        mode: Output mode (human, verbose, json)
        level: Minimum log level
        stream: Output stream (default: stderr)
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    stream = stream or sys.stderr
    use_colors = _is_tty(stream)

    if mode == LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    elif mode == LogMode.VERBOSE:
        formatter = VerboseFormatter(use_colors=use_colors)
    else:
        formatter = HumanFormatter(use_colors=use_colors)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def configure_from_cli(
    verbose: bool = False,
    quiet: bool = False,
    ci: bool = False,
) -> None:
    """Configure logging based on CLI flags.

    Args:
        verbose: Enable verbose mode with timestamps
        quiet: Suppress info messages (warnings and errors only)
        ci: Enable JSON output for CI/CD
    """
    if ci:
        mode = LogMode.JSON
    elif verbose:
        mode = LogMode.VERBOSE
    else:
        mode = LogMode.HUMAN

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    setup_logging(mode=mode, level=level)
