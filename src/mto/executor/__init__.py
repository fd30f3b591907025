"""Execution collaborators that run the transcoding engine."""

from mto.executor.ffmpeg import FFmpegCommand
from mto.executor.interface import (
    ExecutorResult,
    ToolNotFoundError,
    TranscodeCommand,
    get_tool_path,
    require_tool,
)

__all__ = [
    "ExecutorResult",
    "FFmpegCommand",
    "ToolNotFoundError",
    "TranscodeCommand",
    "get_tool_path",
    "require_tool",
]
