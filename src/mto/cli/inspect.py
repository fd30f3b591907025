"""CLI inspect command."""

import json
import sys
from pathlib import Path

import click

from mto.cli.exit_codes import ExitCode
from mto.config import get_config
from mto.executor import ToolNotFoundError
from mto.introspector import FFprobeIntrospector
from mto.metadata import SourceMetadata


def format_human(path: Path, metadata: SourceMetadata) -> str:
    """Format a probe result for terminal output."""
    lines = [f"File: {path}"]
    if metadata.format_name:
        lines.append(f"Container: {metadata.format_name}")
    if metadata.duration is not None:
        lines.append(f"Duration: {metadata.duration:.2f}s")
    if metadata.width and metadata.height:
        resolution = f"{metadata.width}x{metadata.height}"
        if metadata.rotation:
            resolution += f" (rotated {metadata.rotation}°)"
        lines.append(f"Resolution: {resolution}")
    if metadata.video_codec:
        lines.append(f"Video codec: {metadata.video_codec}")
    if metadata.audio_codec:
        lines.append(f"Audio codec: {metadata.audio_codec}")
    if metadata.frame_rate:
        lines.append(f"Frame rate: {metadata.frame_rate}")
    if metadata.bit_rate:
        lines.append(f"Bitrate: {metadata.bit_rate // 1000} kb/s")
    return "\n".join(lines)


@click.command("inspect")
@click.argument("file", type=click.Path(exists=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.pass_context
def inspect_command(ctx: click.Context, file: Path, output_format: str) -> None:
    """Probe FILE and show whether it can be transcoded.

    FILE is the path to the media file to inspect.
    """
    if not file.exists():
        click.echo(f"Error: File not found: {file}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    config = get_config(config_path=(ctx.obj or {}).get("config_path"))
    try:
        introspector = FFprobeIntrospector(timeout=config.transcode.probe_timeout)
    except ToolNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)

    metadata = introspector.identify(file)
    if metadata is None:
        click.echo(f"Unsupported: {file} is not a transcodable media file", err=True)
        sys.exit(ExitCode.UNSUPPORTED_MEDIA)

    if output_format == "json":
        click.echo(json.dumps(metadata.to_dict(), indent=2))
    else:
        click.echo(format_human(file, metadata))
