"""Structured logging module.

Provides configurable logging with JSON format support and file rotation,
plus transcode context (style and source file) on every record.
"""

from mto.logging.config import configure_logging
from mto.logging.context import (
    TranscodeContextFilter,
    clear_transcode_context,
    get_transcode_context,
    set_transcode_context,
    transcode_context,
)
from mto.logging.handlers import JSONFormatter, text_formatter

__all__ = [
    "JSONFormatter",
    "TranscodeContextFilter",
    "clear_transcode_context",
    "configure_logging",
    "get_transcode_context",
    "set_transcode_context",
    "text_formatter",
    "transcode_context",
]
