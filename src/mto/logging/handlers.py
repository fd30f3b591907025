"""Log formatters for transcode runs.

Both formats surface the style and source file of the run that emitted a
record. JSON lines carry them as top-level keys, text lines as a
``[style:file]`` tag in front of the logger name.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(context_tag)s%(name)s: %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Anything on a record beyond these came from ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Set by TranscodeContextFilter
_CONTEXT_ATTRS = frozenset({"style", "source_file", "context_tag"})


class JSONFormatter(logging.Formatter):
    """Format each record as one JSON object.

    Keys are ``time`` (UTC, milliseconds), ``level`` (lower-case),
    ``logger`` and ``message``. While a transcode run is active ``style``
    and ``source`` are added; fields passed via ``extra=`` go under
    ``extra`` and a traceback under ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "time": created.isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        style = getattr(record, "style", None)
        if style:
            entry["style"] = style
        source = getattr(record, "source_file", None)
        if source:
            entry["source"] = source

        extra = extra_fields(record)
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields a caller attached to record with ``extra=``."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS
        and key not in _CONTEXT_ATTRS
        and not key.startswith("_")
    }


def text_formatter() -> logging.Formatter:
    """Return the human-readable formatter.

    Records must pass through TranscodeContextFilter first, which sets
    the ``context_tag`` the format string expects.
    """
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)
