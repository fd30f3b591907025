"""Transcode orchestration for one source file and one style.

The orchestrator probes the source, decides whether it can be transcoded,
builds and runs the job, and records the resulting metadata on the
attachment. Every run is synchronous and performs exactly one transcode
attempt.

States::

    PROBING -> SUPPORTED -> EXECUTING -> SUCCEEDED -> METADATA_MERGE -> DONE
                                      -> FAILED -> DONE (whiny=False)
            -> UNSUPPORTED -> DONE
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import IO, Any

from mto.executor.interface import ExecutorResult, TranscodeCommand
from mto.introspector.interface import MediaIntrospector
from mto.logging.context import transcode_context
from mto.metadata.record import MetadataRecord, OutputMetadata, SourceMetadata
from mto.metadata.store import AttachmentMetadata
from mto.transcode.builder import TranscodeJobSpec, build_job_spec
from mto.transcode.exceptions import TranscodeExecutionError
from mto.transcode.options import TranscodeOptions

_module_logger = logging.getLogger(__name__)


class TranscodeState(Enum):
    """Orchestration state."""

    PENDING = "pending"
    PROBING = "probing"
    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    METADATA_MERGE = "metadata_merge"
    DONE = "done"


class TranscodeOrchestrator:
    """Runs a single style's transcode of a source file.

    The caller owns the returned file. On the supported path it is a
    binary temporary file (``delete=False``) positioned at offset 0 and
    named ``<basename>...<.format>``; on the unsupported path it is a
    byte-identical copy keeping the source extension; on a swallowed
    failure it is the source file object itself.
    """

    def __init__(
        self,
        source: IO[bytes],
        options: TranscodeOptions | Mapping[str, Any] | None,
        *,
        introspector: MediaIntrospector,
        command_factory: Callable[[], TranscodeCommand],
        attachment: AttachmentMetadata | None = None,
        temp_dir: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            source: Open binary source file. Its ``name`` must be a path.
            options: Transcode options, validated if given as a mapping.
            introspector: Probe and measure collaborator.
            command_factory: Creates a fresh execution collaborator.
            attachment: Attachment metadata to merge into. None for a
                standalone run that records nothing.
            temp_dir: Directory for destination temp files (system default
                if None).
            logger: Logger to report progress to.

        Raises:
            ConfigurationError: If options are invalid.
        """
        if not isinstance(options, TranscodeOptions):
            options = TranscodeOptions.from_mapping(options)

        self.source = source
        self.source_path = Path(source.name)
        self.options = options
        self.directive = options.directive
        self.introspector = introspector
        self.command_factory = command_factory
        self.attachment = attachment
        self.temp_dir = temp_dir
        self.log = logger or _module_logger

        self.current_format = self.source_path.suffix
        self.basename = self.source_path.stem

        self.state = TranscodeState.PENDING
        self.source_metadata: SourceMetadata | None = None
        self.job: TranscodeJobSpec | None = None
        self.record: MetadataRecord | None = None

    @property
    def style(self) -> str:
        return self.options.style

    @property
    def whiny(self) -> bool:
        return self.options.whiny

    def run(self) -> IO[bytes]:
        """Run the orchestration to completion.

        Returns:
            The output file handle (see class docstring).

        Raises:
            TranscodeExecutionError: If the engine fails and whiny is True.
            MediaIntrospectionError: If the source file does not exist.
        """
        with transcode_context(self.style, self.source_path):
            self.state = TranscodeState.PROBING
            source_metadata = self.introspector.identify(self.source_path)
            self.source_metadata = source_metadata

            if source_metadata is None:
                self.state = TranscodeState.UNSUPPORTED
                return self._pass_through()

            self.state = TranscodeState.SUPPORTED
            return self._transcode(source_metadata)

    def _allocate_destination(self, suffix: str) -> IO[bytes]:
        return tempfile.NamedTemporaryFile(
            mode="w+b",
            prefix=self.basename,
            suffix=suffix,
            dir=self.temp_dir,
            delete=False,
        )

    def _discard(self, dst: IO[bytes]) -> None:
        dst.close()
        try:
            Path(dst.name).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self.log.warning("Could not remove temp file %s: %s", dst.name, e)

    def _pass_through(self) -> IO[bytes]:
        """Copy the source verbatim; no metadata is produced."""
        self.log.info(
            "%s is not a supported media file; copying it unchanged",
            self.source_path.name,
        )
        dst = self._allocate_destination(self.current_format)
        try:
            with open(self.source_path, "rb") as src:
                shutil.copyfileobj(src, dst)
            dst.flush()
            dst.seek(0)
        except BaseException:
            self._discard(dst)
            raise
        self.state = TranscodeState.DONE
        return dst

    def _transcode(self, source_metadata: SourceMetadata) -> IO[bytes]:
        suffix = f".{self.options.format}" if self.options.format else ""
        dst = self._allocate_destination(suffix)
        dst_path = Path(dst.name)

        try:
            self.job = build_job_spec(
                self.options,
                self.directive,
                self.source_path,
                dst_path,
                source_metadata=source_metadata,
            )
            # The engine writes by path; release our handle while it runs
            dst.close()

            self.state = TranscodeState.EXECUTING
            command = self.job.apply_to(self.command_factory())
            result = command.run()
        except BaseException:
            self._discard(dst)
            raise

        if not result.success:
            self._discard(dst)
            return self._handle_failure(result)

        self.state = TranscodeState.SUCCEEDED
        self.log.info(
            "Successfully transcoded %s to %s", self.basename, dst_path.name
        )

        try:
            self.record = self._measure(dst_path, source_metadata)
            if self.attachment is not None:
                self.state = TranscodeState.METADATA_MERGE
                self.attachment.merge(self.style, self.record)
            output = open(dst_path, "rb")
        except BaseException:
            self._discard(dst)
            raise

        self.state = TranscodeState.DONE
        return output

    def _measure(
        self, dst_path: Path, source_metadata: SourceMetadata
    ) -> MetadataRecord:
        measured = self.introspector.measure(dst_path)
        if measured is None:
            self.log.warning(
                "Could not measure transcoded output %s; recording source only",
                dst_path.name,
            )
            return MetadataRecord(source=source_metadata)
        return MetadataRecord(
            source=source_metadata,
            output=OutputMetadata.from_measurement(measured),
        )

    def _handle_failure(self, result: ExecutorResult) -> IO[bytes]:
        self.state = TranscodeState.FAILED
        detail = result.message or f"exit status {result.returncode}"
        if self.whiny:
            self.log.error("Transcoding %s failed: %s", self.basename, detail)
            raise TranscodeExecutionError(self.basename, detail, result.returncode)

        self.log.warning(
            "Transcoding %s failed (%s); returning the original file",
            self.basename,
            detail,
        )
        self.state = TranscodeState.DONE
        return self.source


def transcode(
    source: IO[bytes],
    options: TranscodeOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> IO[bytes]:
    """Run a single orchestration; see TranscodeOrchestrator for arguments."""
    return TranscodeOrchestrator(source, options, **kwargs).run()
