"""Feature flags for behavior that is off unless explicitly enabled.

Flags are controlled via environment variables of the form
MTO_FEATURE_{FLAG_NAME}. Setting the variable to "1" enables the flag.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

# Registry of known flags (for documentation and log_enabled_flags).
_KNOWN_FLAGS: dict[str, str] = {
    "AUTO_ROTATE": (
        "Honor the auto_rotate option by adding a transpose filter "
        "for rotated sources."
    ),
}


def is_enabled(flag: str) -> bool:
    """Check whether a feature flag is enabled.

    Args:
        flag: Flag name (e.g., "AUTO_ROTATE"). Case-insensitive.

    Returns:
        True if MTO_FEATURE_{FLAG} is set to "1".
    """
    var = f"MTO_FEATURE_{flag.upper()}"
    return os.environ.get(var) == "1"


def log_enabled_flags() -> None:
    """Log all currently enabled feature flags at INFO level."""
    enabled = [name for name in sorted(_KNOWN_FLAGS) if is_enabled(name)]
    if enabled:
        logger.info("Enabled feature flags: %s", ", ".join(enabled))
