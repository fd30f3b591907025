"""Transcode option models.

Options arrive as a free-form mapping (from code, a YAML style file or the
CLI) and are validated into a frozen TranscodeOptions model. Both the
snake_case and camelCase spellings of multi-word keys are accepted.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from mto.transcode.exceptions import ConfigurationError
from mto.transcode.geometry import GeometryDirective, parse_geometry
from mto.transcode.seek import DEFAULT_SEEK_SECONDS, FixedSeek, coerce_seek

DEFAULT_STYLE = "default"
DEFAULT_PAD_COLOR = "black"

# Output formats that produce a single still frame
STILL_IMAGE_FORMATS = frozenset({"jpg", "jpeg", "png", "gif"})

InputParam = tuple[str, str | None]


def normalize_flag(flag: str) -> str:
    """Normalize an engine flag name (``-s`` and ``s`` are the same key)."""
    name = str(flag).strip().lstrip("-")
    if not name:
        raise ValueError(f"Invalid engine flag: {flag!r}")
    return name


def _stringify(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class ConvertOptions(BaseModel):
    """Caller-supplied engine parameters.

    ``input`` is an ordered list of flags placed before the source;
    ``output`` maps flag names to values placed before the destination.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    input: tuple[InputParam, ...] = ()
    output: dict[str, str | None] = Field(default_factory=dict)

    @field_validator("input", mode="before")
    @classmethod
    def normalize_input(cls, v: Any) -> tuple[InputParam, ...]:
        """Accept bare flags, [flag, value] pairs or one-entry mappings."""
        if v is None:
            return ()
        if isinstance(v, (str, Mapping)):
            v = [v]
        params: list[InputParam] = []
        for item in v:
            if isinstance(item, str):
                params.append((normalize_flag(item), None))
            elif isinstance(item, Mapping):
                for flag, value in item.items():
                    params.append((normalize_flag(flag), _stringify(value)))
            elif isinstance(item, (list, tuple)) and len(item) in (1, 2):
                value = item[1] if len(item) == 2 else None
                params.append((normalize_flag(item[0]), _stringify(value)))
            else:
                raise ValueError(f"Invalid input parameter: {item!r}")
        return tuple(params)

    @field_validator("output", mode="before")
    @classmethod
    def normalize_output(cls, v: Any) -> dict[str, str | None]:
        """Normalize flag names; later duplicates win."""
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError("output must be a mapping of flag to value")
        return {normalize_flag(k): _stringify(value) for k, value in v.items()}


class TranscodeOptions(BaseModel):
    """Options for a single style's transcode."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: str | None = None
    geometry: str | None = None
    convert_options: ConvertOptions = Field(
        default_factory=ConvertOptions,
        validation_alias=AliasChoices("convert_options", "convertOptions"),
    )
    time: Any = Field(default_factory=lambda: FixedSeek(DEFAULT_SEEK_SECONDS))
    auto_rotate: bool = Field(
        default=False,
        validation_alias=AliasChoices("auto_rotate", "autoRotate"),
    )
    pad_color: str = Field(
        default=DEFAULT_PAD_COLOR,
        validation_alias=AliasChoices("pad_color", "padColor"),
    )
    style: str = DEFAULT_STYLE
    whiny: bool = True

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().lstrip(".")
        if not v:
            raise ValueError("format must not be empty")
        return v

    @field_validator("geometry")
    @classmethod
    def validate_geometry(cls, v: str | None) -> str | None:
        """Parse eagerly so malformed geometry fails before any engine runs."""
        parse_geometry(v)
        return v

    @field_validator("convert_options", mode="before")
    @classmethod
    def default_convert_options(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v: Any) -> Any:
        if v is None:
            return FixedSeek(DEFAULT_SEEK_SECONDS)
        return coerce_seek(v)

    @field_validator("style")
    @classmethod
    def validate_style(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("style must not be empty")
        return v

    @property
    def directive(self) -> GeometryDirective | None:
        """Parsed geometry directive, or None when no resize is requested."""
        return parse_geometry(self.geometry)

    @property
    def is_still_image(self) -> bool:
        """True if the output format is a single-frame image."""
        return self.format is not None and self.format.lower() in STILL_IMAGE_FORMATS

    def to_mapping(self) -> dict[str, Any]:
        """Return the options as a mapping accepted by from_mapping."""
        return {
            "format": self.format,
            "geometry": self.geometry,
            "convert_options": {
                "input": list(self.convert_options.input),
                "output": dict(self.convert_options.output),
            },
            "time": self.time,
            "auto_rotate": self.auto_rotate,
            "pad_color": self.pad_color,
            "style": self.style,
            "whiny": self.whiny,
        }

    def with_overrides(self, **overrides: Any) -> TranscodeOptions:
        """Return validated options with the given non-None keys replaced.

        Raises:
            ConfigurationError: If an override is invalid.
        """
        data = self.to_mapping()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).from_mapping(data)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> TranscodeOptions:
        """Validate a free-form options mapping.

        Args:
            data: Options mapping, or None for all defaults.

        Returns:
            Validated TranscodeOptions.

        Raises:
            ConfigurationError: If any option is invalid.
        """
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as e:
            raise ConfigurationError(format_validation_error(e)) from e


def format_validation_error(error: ValidationError) -> str:
    """Format a pydantic validation error into a one-line message."""
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return f"Invalid transcode options: {loc}: {msg}"
        return f"Invalid transcode options: {msg}"
    return f"Invalid transcode options: {error}"
