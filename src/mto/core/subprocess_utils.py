"""Running ffprobe and ffmpeg.

Every engine call goes through run_command, so tool output is always
captured as text (undecodable bytes replaced), stdin is never inherited and
each run is logged with the tool name and how long it took.
"""

from __future__ import annotations

import logging
import shlex
import subprocess  # nosec B404 - ffprobe and ffmpeg are external tools
import time
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120


class CommandResult(NamedTuple):
    """Captured output of a finished tool run."""

    stdout: str
    stderr: str
    returncode: int


def run_command(
    args: Sequence[str | Path],
    timeout: float | None = DEFAULT_TIMEOUT,
) -> CommandResult:
    """Run a tool to completion and capture its output.

    Args:
        args: Tool path followed by its arguments.
        timeout: Seconds before the tool is killed, or None to wait for it
            however long it takes (ffmpeg transcodes).

    Returns:
        CommandResult; a non-zero return code is not an error here.

    Raises:
        ValueError: If args is empty.
        subprocess.TimeoutExpired: If the tool outlived the timeout. It has
            already been killed.
        OSError: If the tool could not be started.
    """
    argv = [str(arg) for arg in args]
    if not argv:
        raise ValueError("run_command requires a tool to run")
    tool = Path(argv[0]).name

    logger.debug("Running %s", shlex.join(argv))
    started = time.monotonic()
    try:
        completed = subprocess.run(  # nosec B603 - argv is built, never shell-parsed
            argv,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.warning("%s killed after %ss", tool, timeout)
        raise

    logger.debug(
        "%s exited with status %d after %.2fs",
        tool,
        completed.returncode,
        time.monotonic() - started,
    )
    return CommandResult(
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        returncode=completed.returncode,
    )
