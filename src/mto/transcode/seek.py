"""Seek offsets used when extracting a still image from a video.

The seek is either a fixed duration or a function of the probed source
metadata and the transcode options. It is only resolved for still-image
outputs.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mto.transcode.exceptions import ConfigurationError

if TYPE_CHECKING:
    from mto.metadata.record import SourceMetadata
    from mto.transcode.options import TranscodeOptions

DEFAULT_SEEK_SECONDS = 3.0


@dataclass(frozen=True)
class FixedSeek:
    """Seek to a fixed offset in seconds."""

    seconds: float

    def resolve(
        self,
        source: SourceMetadata | None,
        options: TranscodeOptions,
    ) -> float:
        return self.seconds


@dataclass(frozen=True)
class ComputedSeek:
    """Seek to an offset computed from the source metadata.

    The function receives ``(source_metadata, options)`` and returns the
    offset in seconds. ``source_metadata`` may be None for standalone runs
    without a probe result.
    """

    compute: Callable[..., float]

    def resolve(
        self,
        source: SourceMetadata | None,
        options: TranscodeOptions,
    ) -> float:
        seconds = self.compute(source, options)
        try:
            seconds = float(seconds)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Computed seek must return a number, got {seconds!r}"
            ) from e
        return max(seconds, 0.0)


SeekTime = FixedSeek | ComputedSeek


def coerce_seek(value: Any) -> SeekTime:
    """Convert a literal duration or callable into a seek variant.

    Args:
        value: Number of seconds, a callable, or an existing seek variant.

    Returns:
        FixedSeek or ComputedSeek.

    Raises:
        ConfigurationError: If the value is negative or of an unsupported type.
    """
    if isinstance(value, (FixedSeek, ComputedSeek)):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid seek time: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ConfigurationError(f"Seek time must not be negative: {value}")
        return FixedSeek(float(value))
    if callable(value):
        return ComputedSeek(value)
    raise ConfigurationError(
        f"Seek time must be a number or a callable, got {type(value).__name__}"
    )


def format_seconds(seconds: float) -> str:
    """Format seconds for ffmpeg (``3``, ``2.5``)."""
    if float(seconds).is_integer():
        return str(int(seconds))
    return f"{seconds:.3f}".rstrip("0").rstrip(".")
