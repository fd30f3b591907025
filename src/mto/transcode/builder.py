"""Transcode job specification building.

Turns validated TranscodeOptions and a parsed GeometryDirective into an
engine-agnostic TranscodeJobSpec. Nothing here invokes an external tool.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from mto import feature_flags
from mto.transcode.geometry import GeometryDirective
from mto.transcode.options import InputParam, TranscodeOptions
from mto.transcode.seek import format_seconds

if TYPE_CHECKING:
    from mto.executor.interface import TranscodeCommand
    from mto.metadata.record import SourceMetadata

logger = logging.getLogger(__name__)

SIZE_PARAM = "s"
SEEK_PARAM = "ss"
FILTER_PARAM = "vf"
ROTATE_METADATA_PARAM = "metadata:s:v:0"

AUTO_ROTATE_FLAG = "AUTO_ROTATE"

# Transpose filters that undo a clockwise display rotation
_ROTATION_FILTERS = {
    90: "transpose=1",
    180: "transpose=2,transpose=2",
    270: "transpose=2",
}


@dataclass(frozen=True)
class TranscodeJobSpec:
    """Fully specified transcode job for one source and one destination."""

    source_path: Path
    destination_path: Path
    format: str | None
    input_params: tuple[InputParam, ...]
    output_params: Mapping[str, str | None]
    seek_seconds: float | None = None
    pad_color: str | None = None

    @property
    def size(self) -> str | None:
        """Output size parameter, if a geometry was given."""
        return self.output_params.get(SIZE_PARAM)

    def apply_to(self, command: TranscodeCommand) -> TranscodeCommand:
        """Replay this job on an execution collaborator.

        Args:
            command: Builder-style command to populate.

        Returns:
            The same command, for chaining.
        """
        command.add_source(self.source_path)
        command.add_destination(self.destination_path)
        command.reset_input_filters()
        for flag, value in self.input_params:
            command.add_input_param(flag, value)
        for flag, value in self.output_params.items():
            command.add_output_param(flag, value)
        return command


def rotation_filter(rotation: int | None) -> str | None:
    """Return the transpose filter for a display rotation, if any."""
    if rotation is None:
        return None
    return _ROTATION_FILTERS.get(rotation % 360)


def build_job_spec(
    options: TranscodeOptions,
    directive: GeometryDirective | None,
    source_path: Path,
    destination_path: Path,
    source_metadata: SourceMetadata | None = None,
) -> TranscodeJobSpec:
    """Build a transcode job specification.

    Caller output params are applied first; the geometry-derived size is
    applied last and always wins over a caller ``s`` value. The seek offset
    is only resolved for still-image outputs.

    Args:
        options: Validated transcode options.
        directive: Parsed geometry, or None for no resizing.
        source_path: Path to the source media.
        destination_path: Path the engine writes to.
        source_metadata: Probe result for the source, used by computed seeks
            and auto-rotation.

    Returns:
        Immutable TranscodeJobSpec.
    """
    input_params: list[InputParam] = list(options.convert_options.input)
    output_params: dict[str, str | None] = dict(options.convert_options.output)

    seek_seconds: float | None = None
    if options.is_still_image:
        seek_seconds = options.time.resolve(source_metadata, options)
        input_params.append((SEEK_PARAM, format_seconds(seek_seconds)))

    if options.auto_rotate:
        _apply_auto_rotate(output_params, source_metadata)

    if directive is not None:
        # Re-insert so the size is emitted after every caller param
        output_params.pop(SIZE_PARAM, None)
        output_params[SIZE_PARAM] = directive.sanitized

    return TranscodeJobSpec(
        source_path=source_path,
        destination_path=destination_path,
        format=options.format,
        input_params=tuple(input_params),
        output_params=MappingProxyType(output_params),
        seek_seconds=seek_seconds,
        pad_color=options.pad_color,
    )


def _apply_auto_rotate(
    output_params: dict[str, str | None],
    source_metadata: SourceMetadata | None,
) -> None:
    if not feature_flags.is_enabled(AUTO_ROTATE_FLAG):
        logger.debug(
            "auto_rotate requested but MTO_FEATURE_%s is not enabled; ignoring",
            AUTO_ROTATE_FLAG,
        )
        return
    if source_metadata is None:
        return

    transpose = rotation_filter(source_metadata.rotation)
    if transpose is None:
        return
    if FILTER_PARAM in output_params:
        logger.debug("Caller supplied %s; skipping auto-rotate", FILTER_PARAM)
        return

    output_params[FILTER_PARAM] = transpose
    output_params[ROTATE_METADATA_PARAM] = "rotate=0"
