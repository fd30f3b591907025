"""Per-style metadata records.

A MetadataRecord pairs the probed source metadata with the measured output
dimensions for one (attachment, style). Records serialize to plain dicts so
a whole style map can be stored as one JSON document.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any


def normalize_rotation(rotation: float | int | None) -> int:
    """Normalize a rotation in degrees into [0, 360)."""
    if rotation is None:
        return 0
    return int(round(rotation)) % 360


def reconcile_dimensions(
    width: int | None,
    height: int | None,
    rotation: float | int | None,
) -> tuple[int | None, int | None]:
    """Apply the rotation-aware width/height swap.

    A file stored landscape but displayed rotated by 90 or 270 degrees is
    portrait on screen, so its reported dimensions are swapped.

    Args:
        width: Raw measured width.
        height: Raw measured height.
        rotation: Display rotation in degrees (None means 0).

    Returns:
        Tuple of (width, height) as displayed.
    """
    if normalize_rotation(rotation) in (90, 270):
        return height, width
    return width, height


def _from_known_fields(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass(frozen=True)
class SourceMetadata:
    """Probe result for a source file."""

    width: int | None = None
    height: int | None = None
    rotation: int = 0
    duration: float | None = None
    video_codec: str | None = None
    audio_codec: str | None = None
    format_name: str | None = None
    bit_rate: int | None = None
    frame_rate: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceMetadata:
        return cls(**_from_known_fields(cls, data))


@dataclass(frozen=True)
class OutputDimensions:
    """Raw measurement of a transcoded file."""

    width: int | None
    height: int | None
    rotation: int = 0


@dataclass(frozen=True)
class OutputMetadata:
    """Displayed dimensions of a transcoded file."""

    width: int | None = None
    height: int | None = None

    @classmethod
    def from_measurement(cls, measured: OutputDimensions) -> OutputMetadata:
        """Build output metadata, swapping dimensions for 90/270 rotation."""
        width, height = reconcile_dimensions(
            measured.width, measured.height, measured.rotation
        )
        return cls(width=width, height=height)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OutputMetadata:
        return cls(**_from_known_fields(cls, data))


@dataclass(frozen=True)
class MetadataRecord:
    """Metadata stored for one style of an attachment."""

    source: SourceMetadata
    output: OutputMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"source": self.source.to_dict()}
        if self.output is not None:
            data["output"] = self.output.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetadataRecord:
        output = data.get("output")
        return cls(
            source=SourceMetadata.from_dict(data.get("source") or {}),
            output=OutputMetadata.from_dict(output) if output else None,
        )
