"""FFprobe-based probe and measure collaborators."""

import json
import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from mto.core.subprocess_utils import run_command
from mto.executor.interface import get_tool_path, require_tool
from mto.introspector.interface import MediaIntrospectionError
from mto.introspector.parsers import parse_output_dimensions, parse_source_metadata
from mto.metadata.record import OutputDimensions, SourceMetadata

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 60


class FFprobeIntrospector:
    """ffprobe-based implementation of the probe and measure protocols.

    A file ffprobe cannot read is reported as unsupported (None), never as
    an error; only a missing file or a missing ffprobe binary raises.
    """

    def __init__(
        self,
        ffprobe_path: Path | None = None,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Optional explicit path to ffprobe. If not provided,
                uses the configured path or the system PATH.
            timeout: Seconds before a probe is abandoned.

        Raises:
            ToolNotFoundError: If ffprobe is not available.
        """
        self._ffprobe_path = ffprobe_path or require_tool("ffprobe")
        self._timeout = timeout

    @staticmethod
    def is_available() -> bool:
        """Check if ffprobe is available on the system."""
        return get_tool_path("ffprobe") is not None

    def identify(self, path: Path) -> SourceMetadata | None:
        """Probe a source file.

        Args:
            path: Path to the file.

        Returns:
            SourceMetadata, or None if the file is not readable media.

        Raises:
            MediaIntrospectionError: If the file does not exist.
        """
        data = self._probe(path)
        if data is None:
            return None
        metadata = parse_source_metadata(data)
        if metadata is None:
            logger.info("No media streams found in %s", path.name)
        return metadata

    def measure(self, path: Path) -> OutputDimensions | None:
        """Measure the first video stream of a transcoded file.

        Returns:
            OutputDimensions, or None if the file has no readable video stream.

        Raises:
            MediaIntrospectionError: If the file does not exist.
        """
        data = self._probe(path)
        if data is None:
            return None
        return parse_output_dimensions(data)

    def _probe(self, path: Path) -> dict | None:
        """Run ffprobe and return parsed JSON, or None if it cannot read path."""
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        try:
            stdout, stderr, returncode = run_command(
                [
                    self._ffprobe_path,
                    "-v",
                    "error",
                    "-print_format",
                    "json",
                    "-show_streams",
                    "-show_format",
                    path,
                ],
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning("ffprobe timed out for %s after %ss", path, self._timeout)
            return None

        if returncode != 0:
            logger.info(
                "ffprobe could not read %s: %s",
                path.name,
                stderr.strip() or f"exit status {returncode}",
            )
            return None

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            logger.warning("Invalid ffprobe output for %s: %s", path, e)
            return None

        if not isinstance(data, dict):
            return None
        return data
