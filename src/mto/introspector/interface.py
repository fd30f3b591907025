"""Probe and measure collaborator protocols."""

from pathlib import Path
from typing import Protocol

from mto.metadata.record import OutputDimensions, SourceMetadata


class MediaIntrospectionError(Exception):
    """Raised when media introspection cannot be attempted."""

    pass


class MediaProbe(Protocol):
    """Classifies a source file by probing it.

    A None result is the signal that the file is not transcodable.
    """

    def identify(self, path: Path) -> SourceMetadata | None: ...


class OutputMeasurer(Protocol):
    """Measures a transcoded file's dimensions and rotation."""

    def measure(self, path: Path) -> OutputDimensions | None: ...


class MediaIntrospector(MediaProbe, OutputMeasurer, Protocol):
    """Both halves of introspection, as provided by FFprobeIntrospector."""

    pass
