"""Exceptions raised while configuring or running a transcode.

ConfigurationError always propagates. TranscodeExecutionError only
propagates when the orchestrator runs with ``whiny`` enabled.
"""


class TranscodeError(Exception):
    """Base class for transcode-related errors."""

    pass


class ConfigurationError(TranscodeError):
    """Raised for malformed transcode options, such as a bad geometry string.

    Raised before any external tool is invoked.
    """

    pass


class TranscodeExecutionError(TranscodeError):
    """Raised when the transcoding engine exits with a non-zero status."""

    def __init__(
        self,
        source_name: str,
        detail: str,
        returncode: int | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            source_name: Basename of the source file being transcoded.
            detail: Failure detail reported by the engine.
            returncode: Engine exit status, if known.
        """
        self.source_name = source_name
        self.detail = detail
        self.returncode = returncode
        super().__init__(f"error while transcoding {source_name}: {detail}")
