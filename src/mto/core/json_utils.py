"""JSON helpers for stored metadata documents.

Parsing returns a result object instead of raising or logging, so the caller
decides how to report a corrupt stored document; it is replaced rather than
aborting a transcode.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class JsonParseResult(Generic[T]):
    """Result of a JSON parsing operation.

    Attributes:
        success: True if parsing succeeded, False otherwise.
        value: The parsed value if successful, None otherwise.
        error: Error message if parsing failed, None otherwise.
    """

    success: bool
    value: T | None
    error: str | None = None


def parse_json_object(raw: str | None, *, context: str = "") -> JsonParseResult[dict]:
    """Parse a JSON document that must be an object.

    Args:
        raw: JSON string to parse. None or empty string yields an empty dict.
        context: Context string for error messages (e.g., field name).

    Returns:
        JsonParseResult with the parsed dict. On failure ``success`` is
        False, ``value`` is an empty dict and ``error`` describes the problem.
    """
    if raw is None or raw == "":
        return JsonParseResult(success=True, value={})

    context_prefix = f"{context}: " if context else ""
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        error_msg = f"{context_prefix}Invalid JSON at position {e.pos}: {e.msg}"
        return JsonParseResult(success=False, value={}, error=error_msg)
    except TypeError as e:
        error_msg = f"{context_prefix}TypeError during JSON parsing: {e}"
        return JsonParseResult(success=False, value={}, error=error_msg)

    if not isinstance(value, dict):
        error_msg = f"{context_prefix}Expected a JSON object, got {type(value).__name__}"
        return JsonParseResult(success=False, value={}, error=error_msg)

    return JsonParseResult(success=True, value=value)


def serialize_json(data: dict[str, Any], *, context: str = "") -> str:
    """Serialize data to a JSON string with sorted keys.

    Raises:
        TypeError: If data is not JSON-serializable.
    """
    try:
        return json.dumps(data, sort_keys=True)
    except TypeError as e:
        context_prefix = f"{context}: " if context else ""
        error_msg = f"{context_prefix}Cannot serialize to JSON: {e}"
        raise TypeError(error_msg) from e
