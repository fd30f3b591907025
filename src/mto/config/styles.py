"""Style definition files.

A style file is YAML mapping style names to transcode options::

    styles:
      thumb:
        geometry: "320x240#"
        format: jpg
        time: 5
      default:
        format: mp4
        convert_options:
          output:
            c:v: libx264
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mto.transcode.exceptions import ConfigurationError
from mto.transcode.options import TranscodeOptions

_STYLE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class StyleSet:
    """Named TranscodeOptions loaded from a style file."""

    styles: Mapping[str, TranscodeOptions] = field(default_factory=dict)
    source: Path | None = None

    def __iter__(self) -> Iterator[str]:
        return iter(self.styles)

    def __len__(self) -> int:
        return len(self.styles)

    def get(self, name: str) -> TranscodeOptions:
        """Return the options for a style.

        Raises:
            ConfigurationError: If the style is not defined.
        """
        try:
            return self.styles[name]
        except KeyError:
            available = ", ".join(sorted(self.styles)) or "none"
            raise ConfigurationError(
                f"Unknown style '{name}' (available: {available})"
            ) from None


def parse_styles(data: Any, source: Path | None = None) -> StyleSet:
    """Validate parsed style data.

    Args:
        data: Parsed YAML, either ``{"styles": {...}}`` or the style mapping
            itself.
        source: File the data came from, for messages.

    Returns:
        StyleSet with each style's ``style`` field set to its name.

    Raises:
        ConfigurationError: If the data or any style is invalid.
    """
    where = f" in {source}" if source else ""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Style file must be a YAML mapping{where}")

    raw_styles = data.get("styles", data)
    if not isinstance(raw_styles, dict) or not raw_styles:
        raise ConfigurationError(f"No styles defined{where}")

    styles: dict[str, TranscodeOptions] = {}
    for name, options in raw_styles.items():
        name = str(name)
        if not _STYLE_NAME_PATTERN.match(name):
            raise ConfigurationError(
                f"Style name must be alphanumeric (with - or _): {name}{where}"
            )
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise ConfigurationError(f"Style '{name}' must be a mapping{where}")
        try:
            styles[name] = TranscodeOptions.from_mapping({**options, "style": name})
        except ConfigurationError as e:
            raise ConfigurationError(f"Style '{name}'{where}: {e}") from e

    return StyleSet(styles=styles, source=source)


def load_styles(path: Path) -> StyleSet:
    """Load and validate a YAML style file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the YAML or any style is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Style file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in style file {path}: {e}") from e

    return parse_styles(data, source=path)
