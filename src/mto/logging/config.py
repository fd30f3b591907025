"""Logging setup for the CLI.

configure_logging() replaces the root logger's handlers with a rotating
log file, stderr, or both, as LoggingConfig asks. Every handler gets the
transcode context filter so records carry the active style and source.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from mto.logging.context import TranscodeContextFilter
from mto.logging.handlers import JSONFormatter, text_formatter

if TYPE_CHECKING:
    from mto.config.models import LoggingConfig


def configure_logging(config: LoggingConfig) -> None:
    """Install handlers on the root logger from LoggingConfig.

    stderr is used when no file is configured, when the file cannot be
    opened, or when ``include_stderr`` is set.

    Args:
        config: Logging configuration.
    """
    level = logging.getLevelName(config.level.upper())
    formatter = JSONFormatter() if config.format.casefold() == "json" else text_formatter()

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    context_filter = TranscodeContextFilter()
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)


def _open_log_file(config: LoggingConfig) -> RotatingFileHandler | None:
    """Open the rotating log file, or return None if it cannot be created."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not configured yet, so report on stderr directly
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None
