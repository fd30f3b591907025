"""Transcode context for structured logging.

Provides context propagation using contextvars, so every log record
emitted during a run carries the style and source file being processed.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_style: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "style", default=None
)
_source_file: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source_file", default=None
)


def set_transcode_context(style: str, source: Path | str | None = None) -> None:
    """Set the current transcode context.

    Args:
        style: Style name being produced (e.g., "thumb").
        source: Path to the source file, or None.
    """
    _style.set(style)
    _source_file.set(str(source) if source is not None else None)


def clear_transcode_context() -> None:
    """Clear the current transcode context."""
    _style.set(None)
    _source_file.set(None)


@contextmanager
def transcode_context(
    style: str,
    source: Path | str | None = None,
) -> Generator[None, None, None]:
    """Context manager for a single transcode run.

    Restores the previous context on exit, so runs can nest.

    Example:
        with transcode_context("thumb", "/uploads/clip.mov"):
            logger.info("Probing")  # Record carries style and source_file
    """
    old_style = _style.get()
    old_source = _source_file.get()
    try:
        set_transcode_context(style, source)
        yield
    finally:
        _style.set(old_style)
        _source_file.set(old_source)


def get_transcode_context() -> tuple[str | None, str | None]:
    """Get the current context as (style, source_file)."""
    return _style.get(), _source_file.get()


class TranscodeContextFilter(logging.Filter):
    """Logging filter that injects the transcode context into records.

    Adds ``style`` and ``source_file`` attributes, plus a compact
    ``context_tag`` such as ``[thumb:clip.mov] `` for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        style, source_file = get_transcode_context()

        record.style = style
        record.source_file = source_file

        if style:
            if source_file:
                record.context_tag = f"[{style}:{Path(source_file).name}] "
            else:
                record.context_tag = f"[{style}] "
        else:
            record.context_tag = ""

        return True
