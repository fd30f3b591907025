"""Transcode job building and orchestration.

Module organization:
- geometry.py: Geometry directive parsing
- seek.py: Fixed and computed seek offsets for still images
- options.py: Option models (pydantic)
- builder.py: Job specification building
- orchestrator.py: Probe, execute and record metadata for one style
- exceptions.py: Error kinds

Usage:
    from mto.transcode import TranscodeOrchestrator, TranscodeOptions
"""

from .builder import TranscodeJobSpec, build_job_spec
from .exceptions import ConfigurationError, TranscodeError, TranscodeExecutionError
from .geometry import (
    GeometryDirective,
    GeometryModifier,
    parse_geometry,
    sanitize_geometry,
    strip_modifier,
)
from .options import ConvertOptions, TranscodeOptions
from .orchestrator import TranscodeOrchestrator, TranscodeState, transcode
from .seek import ComputedSeek, FixedSeek, SeekTime, coerce_seek

__all__ = [
    # Geometry
    "GeometryDirective",
    "GeometryModifier",
    "parse_geometry",
    "sanitize_geometry",
    "strip_modifier",
    # Options
    "ComputedSeek",
    "ConvertOptions",
    "FixedSeek",
    "SeekTime",
    "TranscodeOptions",
    "coerce_seek",
    # Job building
    "TranscodeJobSpec",
    "build_job_spec",
    # Orchestration
    "TranscodeOrchestrator",
    "TranscodeState",
    "transcode",
    # Errors
    "ConfigurationError",
    "TranscodeError",
    "TranscodeExecutionError",
]
