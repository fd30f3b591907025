"""Shared test fixtures for the Media Transcode Orchestrator."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

import pytest

from mto.config import clear_config_cache
from mto.executor.interface import ExecutorResult
from mto.metadata import OutputDimensions, SourceMetadata


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep the user's config file and MTO_* variables out of every test."""
    monkeypatch.setenv("MTO_CONFIG_PATH", str(tmp_path / "no-config.toml"))
    for var in (
        "MTO_FFMPEG_PATH",
        "MTO_FFPROBE_PATH",
        "MTO_WHINY",
        "MTO_TEMP_DIR",
        "MTO_PROBE_TIMEOUT",
        "MTO_DATABASE_PATH",
        "MTO_LOG_LEVEL",
        "MTO_LOG_FILE",
        "MTO_LOG_FORMAT",
        "MTO_FEATURE_AUTO_ROTATE",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def source_file(temp_dir: Path) -> Path:
    """A small fake source clip."""
    path = temp_dir / "clip.mov"
    path.write_bytes(b"fake quicktime payload")
    return path


@pytest.fixture
def landscape_metadata() -> SourceMetadata:
    """Probe result for a 1920x1080 h264 clip."""
    return SourceMetadata(
        width=1920,
        height=1080,
        rotation=0,
        duration=12.5,
        video_codec="h264",
        audio_codec="aac",
        format_name="mov,mp4,m4a,3gp,3g2,mj2",
        bit_rate=4_000_000,
        frame_rate="30/1",
    )


class FakeIntrospector:
    """Introspector returning canned probe and measure results."""

    def __init__(
        self,
        source: SourceMetadata | None = None,
        output: OutputDimensions | None = None,
    ) -> None:
        self.source = source
        self.output = output
        self.identified: list[Path] = []
        self.measured: list[Path] = []

    def identify(self, path: Path) -> SourceMetadata | None:
        self.identified.append(path)
        return self.source

    def measure(self, path: Path) -> OutputDimensions | None:
        self.measured.append(path)
        return self.output


class FakeCommand:
    """Records every call and writes a payload to the destination on run."""

    instances: list[FakeCommand] = []

    def __init__(
        self,
        result: ExecutorResult | None = None,
        payload: bytes = b"transcoded",
    ) -> None:
        self.result = result or ExecutorResult(success=True, returncode=0, message="ok")
        self.payload = payload
        self.source: Path | None = None
        self.destination: Path | None = None
        self.input_params: list[tuple[str, str | None]] = []
        self.output_params: list[tuple[str, str | None]] = []
        self.calls: list[str] = []
        self.run_count = 0
        FakeCommand.instances.append(self)

    def add_source(self, path: Path) -> None:
        self.calls.append("add_source")
        self.source = path

    def add_destination(self, path: Path) -> None:
        self.calls.append("add_destination")
        self.destination = path

    def reset_input_filters(self) -> None:
        self.calls.append("reset_input_filters")
        self.input_params.clear()

    def add_input_param(self, flag: str, value: str | None = None) -> None:
        self.calls.append("add_input_param")
        self.input_params.append((flag, value))

    def add_output_param(self, flag: str, value: str | None = None) -> None:
        self.calls.append("add_output_param")
        self.output_params.append((flag, value))

    def run(self) -> ExecutorResult:
        self.calls.append("run")
        self.run_count += 1
        if self.result.success and self.destination is not None:
            self.destination.write_bytes(self.payload)
        return self.result


@pytest.fixture
def fake_command_factory():
    """Factory producing FakeCommand instances; exposes them as .instances."""
    FakeCommand.instances = []

    def factory(
        result: ExecutorResult | None = None, payload: bytes = b"transcoded"
    ):
        def make() -> FakeCommand:
            return FakeCommand(result=result, payload=payload)

        make.instances = FakeCommand.instances
        return make

    return factory


@pytest.fixture
def make_introspector():
    """Return the FakeIntrospector class for building canned introspectors."""
    return FakeIntrospector


@pytest.fixture
def temp_db(temp_dir: Path) -> Path:
    """Create a temporary database path."""
    return temp_dir / "metadata.db"
