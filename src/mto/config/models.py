"""Configuration data models."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class TranscodeConfig:
    """Defaults applied to transcode runs."""

    # Raise on engine failure (True) or return the source unchanged (False)
    whiny: bool = True

    # Directory for destination temp files (None = system temp dir)
    temp_directory: Path | None = None

    # Seconds before an ffprobe call is abandoned
    probe_timeout: int = 60

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.probe_timeout <= 0:
            raise ValueError(
                f"probe_timeout must be positive, got {self.probe_timeout}"
            )


@dataclass
class MetadataConfig:
    """Configuration for the attachment metadata database."""

    database_path: Path = field(
        default_factory=lambda: Path.home() / ".mto" / "metadata.db"
    )

    # Field name holding the serialized style map
    field: str = "meta"


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class MtoConfig:
    """Top-level configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    transcode: TranscodeConfig = field(default_factory=TranscodeConfig)
    metadata: MetadataConfig = field(default_factory=MetadataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
