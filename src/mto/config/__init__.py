"""Configuration loading and models."""

from mto.config.loader import (
    ConfigFileError,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from mto.config.models import (
    LoggingConfig,
    MetadataConfig,
    MtoConfig,
    ToolPathsConfig,
    TranscodeConfig,
)
from mto.config.styles import StyleSet, load_styles

__all__ = [
    "ConfigFileError",
    "LoggingConfig",
    "MetadataConfig",
    "MtoConfig",
    "StyleSet",
    "ToolPathsConfig",
    "TranscodeConfig",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "load_styles",
]
