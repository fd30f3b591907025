"""Tests for TranscodeOrchestrator."""

import json
import logging
from pathlib import Path

import pytest

from mto.executor.interface import ExecutorResult
from mto.introspector.interface import MediaIntrospectionError
from mto.metadata import (
    AttachmentMetadata,
    InMemoryMetadataStore,
    OutputDimensions,
    SourceMetadata,
)
from mto.transcode import (
    ConfigurationError,
    TranscodeExecutionError,
    TranscodeOrchestrator,
    TranscodeState,
    transcode,
)

FAILED = ExecutorResult(success=False, returncode=1, message="Invalid data found")


@pytest.fixture
def store() -> InMemoryMetadataStore:
    return InMemoryMetadataStore()


@pytest.fixture
def attachment(store: InMemoryMetadataStore) -> AttachmentMetadata:
    return AttachmentMetadata(store)


def _orchestrator(src, options, introspector, command_factory, **kwargs):
    return TranscodeOrchestrator(
        src,
        options,
        introspector=introspector,
        command_factory=command_factory,
        **kwargs,
    )


class TestConstruction:
    """Tests for orchestrator setup."""

    def test_invalid_geometry_fails_before_probing(
        self, source_file: Path, make_introspector, fake_command_factory
    ) -> None:
        introspector = make_introspector()
        factory = fake_command_factory()

        with open(source_file, "rb") as src:
            with pytest.raises(ConfigurationError):
                _orchestrator(src, {"geometry": "bogus"}, introspector, factory)

        assert introspector.identified == []
        assert factory.instances == []

    def test_basename_and_format(
        self, source_file: Path, make_introspector, fake_command_factory
    ) -> None:
        with open(source_file, "rb") as src:
            orch = _orchestrator(
                src, {}, make_introspector(), fake_command_factory()
            )
        assert orch.basename == "clip"
        assert orch.current_format == ".mov"
        assert orch.style == "default"
        assert orch.state is TranscodeState.PENDING


class TestUnsupportedSource:
    """Files the probe cannot read are copied unchanged."""

    def test_returns_byte_identical_copy(
        self, source_file: Path, make_introspector, fake_command_factory, attachment
    ) -> None:
        factory = fake_command_factory()
        with open(source_file, "rb") as src:
            orch = _orchestrator(
                src,
                {"format": "mp4", "style": "thumb"},
                make_introspector(source=None),
                factory,
                attachment=attachment,
            )
            result = orch.run()

        try:
            assert result.read() == source_file.read_bytes()
            result_path = Path(result.name)
            assert result_path.name.startswith("clip")
            assert result_path.suffix == ".mov"
            assert result_path != source_file
        finally:
            result.close()
            Path(result.name).unlink()

        assert orch.state is TranscodeState.DONE
        assert orch.job is None
        assert orch.record is None
        assert factory.instances == []

    def test_metadata_untouched(
        self, source_file: Path, make_introspector, fake_command_factory, store
    ) -> None:
        store.write("meta", json.dumps({"original": {"source": {"width": 10}}}))
        before = store.read("meta")

        with open(source_file, "rb") as src:
            result = _orchestrator(
                src,
                {"style": "thumb"},
                make_introspector(source=None),
                fake_command_factory(),
                attachment=AttachmentMetadata(store),
            ).run()
        result.close()
        Path(result.name).unlink()

        assert store.read("meta") == before

    def test_uses_temp_dir(
        self, source_file: Path, temp_dir: Path, make_introspector, fake_command_factory
    ) -> None:
        work = temp_dir / "work"
        work.mkdir()
        with open(source_file, "rb") as src:
            result = _orchestrator(
                src,
                {},
                make_introspector(source=None),
                fake_command_factory(),
                temp_dir=work,
            ).run()
        result.close()
        assert Path(result.name).parent == work


class TestSuccessfulTranscode:
    """Tests for the supported path."""

    def test_end_to_end_thumb(
        self,
        source_file: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
        store: InMemoryMetadataStore,
    ) -> None:
        """clip.mov at 320x240# as mp4 records a 'thumb' entry and keeps others."""
        original = {"original": {"source": {"width": 1920, "height": 1080}}}
        store.write("meta", json.dumps(original))
        introspector = make_introspector(
            source=landscape_metadata,
            output=OutputDimensions(width=320, height=240, rotation=0),
        )
        factory = fake_command_factory(payload=b"mp4 bytes")

        with open(source_file, "rb") as src:
            orch = _orchestrator(
                src,
                {"geometry": "320x240#", "format": "mp4", "style": "thumb"},
                introspector,
                factory,
                attachment=AttachmentMetadata(store),
            )
            result = orch.run()

        try:
            assert result.mode == "rb"
            assert result.read() == b"mp4 bytes"
            result_path = Path(result.name)
            assert result_path.name.startswith("clip")
            assert result_path.suffix == ".mp4"
        finally:
            result.close()
            Path(result.name).unlink()

        assert orch.state is TranscodeState.DONE
        assert orch.job.output_params["s"] == "320x240"

        command = factory.instances[0]
        assert command.run_count == 1
        assert command.source == source_file
        assert command.destination == result_path
        assert ("s", "320x240") in command.output_params

        stored = json.loads(store.read("meta"))
        assert stored["original"] == original["original"]
        assert stored["thumb"]["source"]["width"] == 1920
        assert stored["thumb"]["source"]["video_codec"] == "h264"
        assert stored["thumb"]["output"] == {"width": 320, "height": 240}
        assert introspector.measured == [result_path]

    def test_rotated_output_dimensions_swapped(
        self,
        source_file: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
        attachment: AttachmentMetadata,
    ) -> None:
        introspector = make_introspector(
            source=landscape_metadata,
            output=OutputDimensions(width=1920, height=1080, rotation=90),
        )
        with open(source_file, "rb") as src:
            result = _orchestrator(
                src,
                {"format": "mp4", "style": "portrait"},
                introspector,
                fake_command_factory(),
                attachment=attachment,
            ).run()
        result.close()
        Path(result.name).unlink()

        record = attachment.get("portrait")
        assert (record.output.width, record.output.height) == (1080, 1920)

    def test_repeated_style_overwrites(
        self,
        source_file: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
        attachment: AttachmentMetadata,
    ) -> None:
        for width in (320, 640):
            introspector = make_introspector(
                source=landscape_metadata,
                output=OutputDimensions(width=width, height=240),
            )
            with open(source_file, "rb") as src:
                result = _orchestrator(
                    src,
                    {"format": "mp4", "style": "thumb"},
                    introspector,
                    fake_command_factory(),
                    attachment=attachment,
                ).run()
            result.close()
            Path(result.name).unlink()

        records = attachment.records()
        assert list(records) == ["thumb"]
        assert records["thumb"].output.width == 640

    def test_no_format_keeps_no_extension(
        self,
        source_file: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
    ) -> None:
        with open(source_file, "rb") as src:
            result = _orchestrator(
                src,
                {},
                make_introspector(source=landscape_metadata),
                fake_command_factory(),
            ).run()
        result.close()
        Path(result.name).unlink()
        assert Path(result.name).suffix == ""

    def test_standalone_run_records_without_storing(
        self,
        source_file: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
    ) -> None:
        with open(source_file, "rb") as src:
            orch = _orchestrator(
                src,
                {"format": "mp4"},
                make_introspector(
                    source=landscape_metadata,
                    output=OutputDimensions(width=100, height=50),
                ),
                fake_command_factory(),
            )
            result = orch.run()
        result.close()
        Path(result.name).unlink()

        assert orch.record.output.width == 100
        assert orch.state is TranscodeState.DONE

    def test_record_uses_metadata_identified_at_start(
        self,
        source_file: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
    ) -> None:
        factory = fake_command_factory()

        def command_factory():
            # The public attribute is informational only
            orch.source_metadata = None
            return factory()

        with open(source_file, "rb") as src:
            orch = _orchestrator(
                src,
                {"format": "mp4"},
                make_introspector(
                    source=landscape_metadata,
                    output=OutputDimensions(width=100, height=50),
                ),
                command_factory,
            )
            result = orch.run()
        result.close()
        Path(result.name).unlink()

        assert orch.record.source == landscape_metadata
        assert orch.record.output.width == 100

    def test_unmeasurable_output_records_source_only(
        self,
        source_file: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
        attachment: AttachmentMetadata,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with open(source_file, "rb") as src:
            with caplog.at_level(logging.WARNING):
                result = _orchestrator(
                    src,
                    {"format": "mp4", "style": "thumb"},
                    make_introspector(source=landscape_metadata, output=None),
                    fake_command_factory(),
                    attachment=attachment,
                ).run()
        result.close()
        Path(result.name).unlink()

        assert attachment.read_raw()["thumb"] == {
            "source": landscape_metadata.to_dict()
        }
        assert "Could not measure" in caplog.text

    def test_still_image_seek_uses_probe(
        self,
        source_file: Path,
        make_introspector,
        fake_command_factory,
    ) -> None:
        metadata = SourceMetadata(width=640, height=480, duration=30.0)
        factory = fake_command_factory()
        with open(source_file, "rb") as src:
            result = _orchestrator(
                src,
                {"format": "jpg", "time": lambda source, options: source.duration / 3},
                make_introspector(source=metadata),
                factory,
            ).run()
        result.close()
        Path(result.name).unlink()

        assert ("ss", "10") in factory.instances[0].input_params

    def test_injected_logger_used(
        self,
        source_file: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        logger = logging.getLogger("tests.injected")
        with open(source_file, "rb") as src:
            with caplog.at_level(logging.INFO, logger="tests.injected"):
                result = _orchestrator(
                    src,
                    {"format": "mp4"},
                    make_introspector(source=landscape_metadata),
                    fake_command_factory(),
                    logger=logger,
                ).run()
        result.close()
        Path(result.name).unlink()

        assert any(
            r.name == "tests.injected" and "Successfully transcoded" in r.getMessage()
            for r in caplog.records
        )


class TestFailedTranscode:
    """Tests for engine failures."""

    def test_whiny_raises_with_basename(
        self,
        source_file: Path,
        temp_dir: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
        store: InMemoryMetadataStore,
    ) -> None:
        work = temp_dir / "work"
        work.mkdir()
        with open(source_file, "rb") as src:
            orch = _orchestrator(
                src,
                {"format": "mp4", "whiny": True},
                make_introspector(source=landscape_metadata),
                fake_command_factory(result=FAILED),
                attachment=AttachmentMetadata(store),
                temp_dir=work,
            )
            with pytest.raises(TranscodeExecutionError) as exc_info:
                orch.run()

        assert "clip" in str(exc_info.value)
        assert "Invalid data found" in str(exc_info.value)
        assert exc_info.value.returncode == 1
        assert orch.state is TranscodeState.FAILED
        assert store.read("meta") is None
        assert list(work.iterdir()) == []

    def test_not_whiny_returns_source(
        self,
        source_file: Path,
        temp_dir: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
        store: InMemoryMetadataStore,
    ) -> None:
        work = temp_dir / "work"
        work.mkdir()
        store.write("meta", json.dumps({"original": {"source": {}}}))
        before = store.read("meta")

        with open(source_file, "rb") as src:
            orch = _orchestrator(
                src,
                {"format": "mp4", "whiny": False, "style": "thumb"},
                make_introspector(source=landscape_metadata),
                fake_command_factory(result=FAILED),
                attachment=AttachmentMetadata(store),
                temp_dir=work,
            )
            result = orch.run()
            assert result is src

        assert orch.state is TranscodeState.DONE
        assert orch.record is None
        assert store.read("meta") == before
        assert list(work.iterdir()) == []

    def test_missing_source_raises(
        self, temp_dir: Path, fake_command_factory
    ) -> None:
        class MissingFileIntrospector:
            def identify(self, path):
                raise MediaIntrospectionError(f"File not found: {path}")

            def measure(self, path):
                return None

        path = temp_dir / "gone.mov"
        path.write_bytes(b"x")
        with open(path, "rb") as src:
            with pytest.raises(MediaIntrospectionError):
                _orchestrator(
                    src, {}, MissingFileIntrospector(), fake_command_factory()
                ).run()


class TestTranscodeFunction:
    """Tests for the transcode() helper."""

    def test_runs_once(
        self,
        source_file: Path,
        landscape_metadata: SourceMetadata,
        make_introspector,
        fake_command_factory,
    ) -> None:
        factory = fake_command_factory(payload=b"out")
        with open(source_file, "rb") as src:
            result = transcode(
                src,
                {"format": "webm"},
                introspector=make_introspector(source=landscape_metadata),
                command_factory=factory,
            )
        assert result.read() == b"out"
        result.close()
        Path(result.name).unlink()
        assert len(factory.instances) == 1
