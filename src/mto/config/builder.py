"""Configuration builder with explicit layering.

ConfigBuilder composes MtoConfig from several ConfigSources; later sources
override earlier ones for every value they set.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from mto.config.env import EnvReader
from mto.config.models import (
    LoggingConfig,
    MetadataConfig,
    MtoConfig,
    ToolPathsConfig,
    TranscodeConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None means "not specified in this source".
    """

    # Tool paths
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None

    # Transcode defaults
    whiny: bool | None = None
    temp_directory: Path | None = None
    probe_timeout: int | None = None

    # Metadata database
    database_path: Path | None = None
    metadata_field: str | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds MtoConfig by layering ConfigSources with precedence.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply a source; its non-None values override existing ones."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> MtoConfig:
        """Build the final MtoConfig with defaults for unset values.

        Raises:
            ValueError: If a value fails model validation.
        """
        tools = ToolPathsConfig(
            ffmpeg=self._get("ffmpeg_path", None),
            ffprobe=self._get("ffprobe_path", None),
        )

        transcode_defaults = TranscodeConfig()
        transcode = TranscodeConfig(
            whiny=self._get("whiny", transcode_defaults.whiny),
            temp_directory=self._get("temp_directory", None),
            probe_timeout=self._get("probe_timeout", transcode_defaults.probe_timeout),
        )

        metadata_defaults = MetadataConfig()
        metadata = MetadataConfig(
            database_path=self._get("database_path", metadata_defaults.database_path),
            field=self._get("metadata_field", metadata_defaults.field),
        )

        logging_defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=self._get("logging_level", logging_defaults.level),
            file=self._get("logging_file", None),
            format=self._get("logging_format", logging_defaults.format),
            include_stderr=self._get(
                "logging_include_stderr", logging_defaults.include_stderr
            ),
            max_bytes=self._get("logging_max_bytes", logging_defaults.max_bytes),
            backup_count=self._get(
                "logging_backup_count", logging_defaults.backup_count
            ),
        )

        return MtoConfig(
            tools=tools,
            transcode=transcode,
            metadata=metadata,
            logging=logging_config,
        )


def _optional_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create a ConfigSource from parsed TOML sections.

    Recognized sections: ``[tools]``, ``[transcode]``, ``[metadata]`` and
    ``[logging]``.
    """
    tools = file_config.get("tools", {})
    transcode = file_config.get("transcode", {})
    metadata = file_config.get("metadata", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        ffmpeg_path=_optional_path(tools.get("ffmpeg")),
        ffprobe_path=_optional_path(tools.get("ffprobe")),
        whiny=transcode.get("whiny"),
        temp_directory=_optional_path(transcode.get("temp_directory")),
        probe_timeout=transcode.get("probe_timeout"),
        database_path=_optional_path(metadata.get("database_path")),
        metadata_field=metadata.get("field"),
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create a ConfigSource from MTO_* environment variables."""
    return ConfigSource(
        ffmpeg_path=reader.get_path("MTO_FFMPEG_PATH"),
        ffprobe_path=reader.get_path("MTO_FFPROBE_PATH"),
        whiny=reader.get_bool("MTO_WHINY"),
        temp_directory=reader.get_path("MTO_TEMP_DIR"),
        probe_timeout=reader.get_int("MTO_PROBE_TIMEOUT"),
        database_path=reader.get_path("MTO_DATABASE_PATH", must_exist=False),
        logging_level=reader.get_str("MTO_LOG_LEVEL"),
        logging_file=reader.get_path("MTO_LOG_FILE", must_exist=False),
        logging_format=reader.get_str("MTO_LOG_FORMAT"),
    )
