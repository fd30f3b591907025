"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (MTO_*)
3. Config file (~/.mto/config.toml)
4. Default values

Environment variables:
- MTO_CONFIG_PATH: Path to config file (overrides default location)
- MTO_FFMPEG_PATH / MTO_FFPROBE_PATH: Paths to the ffmpeg tools
- MTO_WHINY: Raise on transcode failure ("1"/"true") or swallow it
- MTO_TEMP_DIR: Directory for destination temp files
- MTO_PROBE_TIMEOUT: Seconds before an ffprobe call is abandoned
- MTO_DATABASE_PATH: Path to the attachment metadata database
- MTO_LOG_LEVEL / MTO_LOG_FILE / MTO_LOG_FORMAT: Logging overrides
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path

from mto.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from mto.config.env import EnvReader
from mto.config.models import MtoConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".mto"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict, float]] = {}
_config_cache_lock = threading.Lock()


class ConfigFileError(Exception):
    """Raised when a config file cannot be parsed in strict mode."""

    pass


def get_default_config_path() -> Path:
    """Get the config file path, honoring MTO_CONFIG_PATH."""
    env_path = os.environ.get("MTO_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_toml_file(path: Path, *, strict: bool = False) -> dict:
    """Load and parse a TOML file.

    Args:
        path: Path to the TOML file.
        strict: Raise ConfigFileError on parse failure instead of
            returning an empty dict.

    Returns:
        Parsed dictionary. Empty dict if the file doesn't exist.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with open(path, "rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigFileError(f"Failed to load config file {path}: {e}") from e
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from TOML file, cached with mtime invalidation.

    Args:
        path: Path to config file. If None, uses the default location.
        strict: Raise ConfigFileError on parse failures.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        if path in _config_cache:
            cached_config, cached_mtime = _config_cache[path]
            if current_mtime == cached_mtime:
                return cached_config

        result = load_toml_file(path, strict=strict)
        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache. Primarily useful for testing."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    database_path: Path | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> MtoConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides MTO_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        database_path: CLI override for the metadata database path.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: Raise ConfigFileError on config file parse failures.

    Returns:
        MtoConfig with merged configuration.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(
        ConfigSource(
            ffmpeg_path=ffmpeg_path,
            ffprobe_path=ffprobe_path,
            database_path=database_path,
        )
    )
    return builder.build()
