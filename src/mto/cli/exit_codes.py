"""Centralized exit codes for all CLI commands.

Exit code ranges (1 and 2 are left to click for aborts and usage errors):
    0: Success
    10-19: Validation errors (config, styles)
    20-29: Target/file errors
    30-39: Tool/dependency errors
    40-49: Operation errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for mto CLI commands."""

    # Validation errors (10-19)
    CONFIG_ERROR = 11
    STYLE_NOT_FOUND = 12

    # Target/file errors (20-29)
    TARGET_NOT_FOUND = 20
    UNSUPPORTED_MEDIA = 23

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Operation errors (40-49)
    OPERATION_FAILED = 40
