"""Core utilities package.

Pure helpers shared across the codebase: JSON handling for stored
metadata and the subprocess wrapper used for external tools.
"""

from mto.core.json_utils import JsonParseResult, parse_json_object, serialize_json
from mto.core.subprocess_utils import CommandResult, run_command

__all__ = [
    "CommandResult",
    "JsonParseResult",
    "parse_json_object",
    "run_command",
    "serialize_json",
]
