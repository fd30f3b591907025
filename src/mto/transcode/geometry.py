"""Geometry directive parsing.

A geometry string is an ImageMagick-style size such as ``320x240``,
``#200x300`` or ``!x100``. A single leading character selects the resize
policy and a ``!`` at the start of either dimension keeps the aspect ratio.

All functions here are pure; the raw string is never modified.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from mto.transcode.exceptions import ConfigurationError

AUTO: Literal["auto"] = "auto"

# Characters removed before the geometry is handed to the engine
DIRECTIVE_CHARS = "#!<>)"

_SANITIZE_PATTERN = re.compile(f"[{re.escape(DIRECTIVE_CHARS)}]")
# An optional leading "!" then digits; the height may carry trailing
# directive characters ("320x240#")
_WIDTH_PATTERN = re.compile(r"^(!?)(\d*)$")
_HEIGHT_PATTERN = re.compile(f"^(!?)(\\d*)[{re.escape(DIRECTIVE_CHARS)}]*$")


class GeometryModifier(Enum):
    """Resize policy selected by the leading geometry character."""

    NONE = ""
    PAD = "#"
    ENLARGE = "<"
    SHRINK = ">"


_MODIFIER_CHARS = {
    GeometryModifier.PAD.value: GeometryModifier.PAD,
    GeometryModifier.ENLARGE.value: GeometryModifier.ENLARGE,
    GeometryModifier.SHRINK.value: GeometryModifier.SHRINK,
}

Dimension = int | Literal["auto"]


@dataclass(frozen=True)
class GeometryDirective:
    """Parsed geometry string."""

    raw: str
    modifier: GeometryModifier
    width: Dimension
    height: Dimension
    keep_aspect: bool

    @property
    def pad_only(self) -> bool:
        return self.keep_aspect and self.modifier is GeometryModifier.PAD

    @property
    def enlarge_only(self) -> bool:
        return self.keep_aspect and self.modifier is GeometryModifier.ENLARGE

    @property
    def shrink_only(self) -> bool:
        return self.keep_aspect and self.modifier is GeometryModifier.SHRINK

    @property
    def sanitized(self) -> str:
        """Geometry string with every directive character removed."""
        return sanitize_geometry(self.raw)


def strip_modifier(geometry: str) -> tuple[GeometryModifier, str]:
    """Split a leading modifier character off a geometry string.

    Args:
        geometry: Raw geometry string.

    Returns:
        Tuple of (modifier, remaining string). The remaining string is the
        input unchanged when there is no leading modifier.
    """
    modifier = _MODIFIER_CHARS.get(geometry[:1])
    if modifier is None:
        return GeometryModifier.NONE, geometry
    return modifier, geometry[1:]


def sanitize_geometry(geometry: str) -> str:
    """Remove ``# ! < > )`` from a geometry string."""
    return _SANITIZE_PATTERN.sub("", geometry)


def _parse_dimension(
    value: str, pattern: re.Pattern[str], geometry: str
) -> tuple[Dimension, bool]:
    """Return (dimension, keep_aspect) for one side of the ``x``."""
    match = pattern.match(value)
    if match is None:
        raise ConfigurationError(
            f"Invalid geometry '{geometry}': dimension '{value}' is not numeric"
        )
    keep_aspect = match.group(1) == "!"
    digits = match.group(2)
    if not digits:
        return AUTO, keep_aspect
    size = int(digits)
    if size == 0:
        raise ConfigurationError(
            f"Invalid geometry '{geometry}': dimensions must be greater than zero"
        )
    return size, keep_aspect


def parse_geometry(geometry: str | None) -> GeometryDirective | None:
    """Parse a geometry string into a GeometryDirective.

    Each dimension is an optional ``!`` followed by digits; an empty
    dimension means "auto". Directive characters are only tolerated after
    the height, so ``320x240#`` parses but ``3#20x240`` does not.

    Args:
        geometry: Geometry string such as ``"320x240"`` or ``"#!x100"``,
            or None when no resizing is requested.

    Returns:
        GeometryDirective, or None if geometry is None.

    Raises:
        ConfigurationError: If the string has no single ``x`` separator,
            a dimension is not numeric or is zero, or neither dimension
            is given.
    """
    if geometry is None:
        return None

    raw = geometry.strip()
    modifier, rest = strip_modifier(raw)
    parts = rest.split("x")
    if len(parts) != 2:
        raise ConfigurationError(
            f"Invalid geometry '{geometry}': expected WIDTHxHEIGHT"
        )

    width, width_keeps = _parse_dimension(parts[0], _WIDTH_PATTERN, geometry)
    height, height_keeps = _parse_dimension(parts[1], _HEIGHT_PATTERN, geometry)

    if width == AUTO and height == AUTO:
        raise ConfigurationError(
            f"Invalid geometry '{geometry}': at least one dimension is required"
        )

    return GeometryDirective(
        raw=raw,
        modifier=modifier,
        width=width,
        height=height,
        keep_aspect=width_keeps or height_keeps,
    )
