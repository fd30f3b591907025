"""Tests for metadata records."""

import pytest

from mto.metadata.record import (
    MetadataRecord,
    OutputDimensions,
    OutputMetadata,
    SourceMetadata,
    normalize_rotation,
    reconcile_dimensions,
)


class TestNormalizeRotation:
    """Tests for normalize_rotation."""

    @pytest.mark.parametrize(
        ("rotation", "expected"),
        [(None, 0), (0, 0), (90, 90), (-90, 270), (450, 90), (89.6, 90), (360, 0)],
    )
    def test_normalizes(self, rotation, expected) -> None:
        assert normalize_rotation(rotation) == expected


class TestReconcileDimensions:
    """Width and height swap for 90 and 270 degree rotations."""

    @pytest.mark.parametrize("rotation", [90, 270, -90])
    def test_swaps_for_quarter_turns(self, rotation) -> None:
        assert reconcile_dimensions(1920, 1080, rotation) == (1080, 1920)

    @pytest.mark.parametrize("rotation", [0, 180, None])
    def test_keeps_otherwise(self, rotation) -> None:
        assert reconcile_dimensions(1920, 1080, rotation) == (1920, 1080)

    def test_missing_dimension_swapped_too(self) -> None:
        assert reconcile_dimensions(None, 1080, 90) == (1080, None)


class TestOutputMetadata:
    """Tests for OutputMetadata."""

    def test_from_rotated_measurement(self) -> None:
        measured = OutputDimensions(width=640, height=360, rotation=270)
        assert OutputMetadata.from_measurement(measured) == OutputMetadata(360, 640)

    def test_from_unrotated_measurement(self) -> None:
        measured = OutputDimensions(width=640, height=360)
        assert OutputMetadata.from_measurement(measured) == OutputMetadata(640, 360)


class TestMetadataRecord:
    """Tests for MetadataRecord serialization."""

    def test_to_dict_with_output(self) -> None:
        record = MetadataRecord(
            source=SourceMetadata(width=1920, height=1080, video_codec="h264"),
            output=OutputMetadata(width=320, height=240),
        )
        data = record.to_dict()

        assert data["source"]["width"] == 1920
        assert data["source"]["video_codec"] == "h264"
        assert data["output"] == {"width": 320, "height": 240}

    def test_to_dict_omits_missing_output(self) -> None:
        data = MetadataRecord(source=SourceMetadata()).to_dict()
        assert "output" not in data

    def test_from_dict_ignores_unknown_fields(self) -> None:
        record = MetadataRecord.from_dict(
            {
                "source": {"width": 10, "height": 20, "legacy": True},
                "output": {"width": 5, "height": 6, "extra": 1},
            }
        )
        assert record.source.width == 10
        assert record.output == OutputMetadata(5, 6)

    def test_from_dict_without_output(self) -> None:
        record = MetadataRecord.from_dict({"source": {"rotation": 90}})
        assert record.source.rotation == 90
        assert record.output is None
