"""Execution collaborator protocol and tool path resolution."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class ExecutorResult:
    """Result of running a transcode command."""

    success: bool
    """True if the engine exited with status 0."""

    returncode: int
    """Engine exit status."""

    message: str = ""
    """Failure detail (tail of stderr) or a short success message."""


class TranscodeCommand(Protocol):
    """Builder-style command accumulated and then run once.

    Flags are passed without leading dashes; a value of None means the
    flag takes no argument.
    """

    def add_source(self, path: Path) -> None: ...

    def add_destination(self, path: Path) -> None: ...

    def reset_input_filters(self) -> None: ...

    def add_input_param(self, flag: str, value: str | None = None) -> None: ...

    def add_output_param(self, flag: str, value: str | None = None) -> None: ...

    def run(self) -> ExecutorResult: ...


class ToolNotFoundError(RuntimeError):
    """Raised when a required external tool cannot be located."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(
            f"Required tool not available: {tool_name}. "
            "Install ffmpeg, or set MTO_FFMPEG_PATH / MTO_FFPROBE_PATH "
            "or the [tools] section of ~/.mto/config.toml."
        )


def get_tool_path(tool_name: str) -> Path | None:
    """Get path to a tool, or None if not available.

    A configured path takes precedence over the system PATH.

    Args:
        tool_name: Name of the tool ("ffmpeg" or "ffprobe").

    Returns:
        Path to the tool or None if not available.
    """
    from mto.config import get_config

    tools = get_config().tools
    configured: Path | None = getattr(tools, tool_name, None)
    if configured is not None:
        if configured.exists():
            return configured
        return None

    found = shutil.which(tool_name)
    return Path(found) if found else None


def require_tool(tool_name: str) -> Path:
    """Get path to a required tool.

    Raises:
        ToolNotFoundError: If the tool is not available.
    """
    path = get_tool_path(tool_name)
    if path is None:
        raise ToolNotFoundError(tool_name)
    return path
