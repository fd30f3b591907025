"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into metadata objects. They do
no I/O, so they are tested directly against fixture dicts.
"""

import logging

from mto.metadata.record import OutputDimensions, SourceMetadata, normalize_rotation

logger = logging.getLogger(__name__)


def parse_duration(value: str | None) -> float | None:
    """Parse a duration string from ffprobe (e.g. "12.345000") into seconds."""
    if value is None:
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def parse_int(value: object) -> int | None:
    """Parse an integer field that ffprobe may report as a string."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def validate_dimension(value: object, field_name: str) -> int | None:
    """Return a positive dimension or None, logging anything invalid."""
    parsed = parse_int(value)
    if parsed is None:
        if value is not None:
            logger.warning("Expected int for %s, got %r", field_name, value)
        return None
    if parsed <= 0:
        logger.warning("Invalid non-positive %s: %d", field_name, parsed)
        return None
    return parsed


def parse_rotation(stream: dict) -> int:
    """Extract the display rotation of a video stream in degrees.

    Older ffprobe versions report a ``rotate`` tag; newer ones report a
    display matrix in ``side_data_list`` whose rotation is counter-clockwise
    (``-90`` for a clip shot in portrait). The matrix value is negated so
    both sources report the same clockwise rotation.

    Returns:
        Rotation normalized into [0, 360); 0 when absent.
    """
    tags = stream.get("tags") or {}
    rotate_tag = tags.get("rotate")
    if rotate_tag is not None:
        rotation = parse_int(rotate_tag)
        if rotation is not None:
            return normalize_rotation(rotation)

    for side_data in stream.get("side_data_list") or []:
        if "rotation" in side_data:
            try:
                return normalize_rotation(-float(side_data["rotation"]))
            except (TypeError, ValueError):
                logger.warning("Invalid display matrix rotation: %r", side_data)
    return 0


def _first_stream(streams: list[dict], codec_type: str) -> dict | None:
    for stream in streams:
        if stream.get("codec_type") == codec_type:
            return stream
    return None


def parse_source_metadata(data: dict) -> SourceMetadata | None:
    """Build SourceMetadata from ffprobe output.

    Args:
        data: Parsed ffprobe JSON (``-show_streams -show_format``).

    Returns:
        SourceMetadata, or None when the output lists no streams.
    """
    streams = data.get("streams") or []
    if not streams:
        return None

    fmt = data.get("format") or {}
    video = _first_stream(streams, "video")
    audio = _first_stream(streams, "audio")

    duration = parse_duration(fmt.get("duration"))
    if duration is None and video is not None:
        duration = parse_duration(video.get("duration"))

    frame_rate = None
    if video is not None:
        frame_rate = video.get("r_frame_rate") or video.get("avg_frame_rate")
        if frame_rate == "0/0":
            frame_rate = None

    return SourceMetadata(
        width=validate_dimension(video.get("width"), "width") if video else None,
        height=validate_dimension(video.get("height"), "height") if video else None,
        rotation=parse_rotation(video) if video else 0,
        duration=duration,
        video_codec=video.get("codec_name") if video else None,
        audio_codec=audio.get("codec_name") if audio else None,
        format_name=fmt.get("format_name"),
        bit_rate=parse_int(fmt.get("bit_rate")),
        frame_rate=frame_rate,
    )


def parse_output_dimensions(data: dict) -> OutputDimensions | None:
    """Extract raw width, height and rotation of the first video stream.

    Returns:
        OutputDimensions, or None if the output has no video stream.
    """
    video = _first_stream(data.get("streams") or [], "video")
    if video is None:
        return None
    return OutputDimensions(
        width=validate_dimension(video.get("width"), "width"),
        height=validate_dimension(video.get("height"), "height"),
        rotation=parse_rotation(video),
    )
