"""Media introspection via ffprobe."""

from mto.introspector.ffprobe import FFprobeIntrospector
from mto.introspector.interface import (
    MediaIntrospectionError,
    MediaIntrospector,
    MediaProbe,
    OutputMeasurer,
)
from mto.introspector.parsers import (
    parse_output_dimensions,
    parse_rotation,
    parse_source_metadata,
)

__all__ = [
    "FFprobeIntrospector",
    "MediaIntrospectionError",
    "MediaIntrospector",
    "MediaProbe",
    "OutputMeasurer",
    "parse_output_dimensions",
    "parse_rotation",
    "parse_source_metadata",
]
