"""FFmpeg implementation of the TranscodeCommand protocol."""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
from pathlib import Path

from mto.core.subprocess_utils import run_command
from mto.executor.interface import ExecutorResult, require_tool

logger = logging.getLogger(__name__)

# Number of stderr lines kept in a failure message
STDERR_TAIL_LINES = 5

FRAMES_PARAM = "frames:v"

# Destinations ffmpeg writes as a single image rather than an image sequence
SINGLE_FRAME_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".gif"})


class FFmpegCommand:
    """Accumulates ffmpeg arguments and runs a single transcode.

    The rendered command is::

        ffmpeg -y -hide_banner -loglevel error [input params] -i SRC
            [output params] DST

    Output params are keyed by flag, so setting a flag twice keeps the
    last value. Image destinations (jpg, jpeg, png, gif) are limited to one
    frame unless a ``frames:v`` param was given.
    """

    def __init__(self, ffmpeg_path: Path | None = None, quiet: bool = True) -> None:
        """Initialize the command.

        Args:
            ffmpeg_path: Explicit ffmpeg path. Resolved from configuration
                or PATH when the command is rendered if not given.
            quiet: Only log errors from ffmpeg itself.
        """
        self._ffmpeg_path = ffmpeg_path
        self._quiet = quiet
        self._source: Path | None = None
        self._destination: Path | None = None
        self._input_params: list[tuple[str, str | None]] = []
        self._output_params: dict[str, str | None] = {}

    def add_source(self, path: Path) -> None:
        if self._source is not None and self._source != Path(path):
            raise ValueError("FFmpegCommand supports a single source")
        self._source = Path(path)

    def add_destination(self, path: Path) -> None:
        self._destination = Path(path)

    def reset_input_filters(self) -> None:
        self._input_params.clear()

    def add_input_param(self, flag: str, value: str | None = None) -> None:
        self._input_params.append((flag, value))

    def add_output_param(self, flag: str, value: str | None = None) -> None:
        self._output_params[flag] = value

    @property
    def ffmpeg_path(self) -> Path:
        if self._ffmpeg_path is None:
            self._ffmpeg_path = require_tool("ffmpeg")
        return self._ffmpeg_path

    def build_args(self) -> list[str]:
        """Render the full ffmpeg argument list.

        Raises:
            ValueError: If the source or destination is missing.
            ToolNotFoundError: If ffmpeg cannot be located.
        """
        if self._source is None or self._destination is None:
            raise ValueError("FFmpegCommand requires a source and a destination")

        args = [str(self.ffmpeg_path), "-y", "-hide_banner"]
        if self._quiet:
            args.extend(["-loglevel", "error"])
        args.extend(_render_params(self._input_params))
        args.extend(["-i", str(self._source)])
        output_params = dict(self._output_params)
        if self._destination.suffix.lower() in SINGLE_FRAME_SUFFIXES:
            output_params.setdefault(FRAMES_PARAM, "1")
        args.extend(_render_params(output_params.items()))
        args.append(str(self._destination))
        return args

    def run(self) -> ExecutorResult:
        """Run ffmpeg to completion.

        No timeout is applied; the call blocks until ffmpeg exits.

        Returns:
            ExecutorResult with the exit status and, on failure, the tail of
            ffmpeg's stderr.
        """
        args = self.build_args()
        logger.info("Running ffmpeg: %s -> %s", self._source, self._destination)
        try:
            _stdout, stderr, returncode = run_command(args, timeout=None)
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("Could not run ffmpeg: %s", e)
            return ExecutorResult(success=False, returncode=-1, message=str(e))

        if returncode != 0:
            tail = "\n".join(stderr.strip().splitlines()[-STDERR_TAIL_LINES:])
            message = tail or f"ffmpeg exited with status {returncode}"
            logger.debug("ffmpeg failed with status %d: %s", returncode, message)
            return ExecutorResult(success=False, returncode=returncode, message=message)

        return ExecutorResult(success=True, returncode=0, message="ok")


def _render_params(params) -> list[str]:
    args: list[str] = []
    for flag, value in params:
        args.append(f"-{flag}")
        if value is not None:
            args.append(value)
    return args
