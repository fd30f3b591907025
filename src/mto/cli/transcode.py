"""CLI transcode command."""

import logging
import shutil
import sys
from pathlib import Path

import click

from mto.cli.exit_codes import ExitCode
from mto.config import get_config, load_styles
from mto.executor import FFmpegCommand, ToolNotFoundError
from mto.introspector import FFprobeIntrospector
from mto.metadata import AttachmentMetadata, SqliteMetadataStore
from mto.transcode import (
    ConfigurationError,
    TranscodeExecutionError,
    TranscodeOptions,
    TranscodeOrchestrator,
    TranscodeState,
)
from mto.transcode.options import DEFAULT_STYLE

logger = logging.getLogger(__name__)


def _resolve_options(
    styles_file: Path | None,
    style: str | None,
    geometry: str | None,
    output_format: str | None,
    seek: float | None,
    whiny: bool | None,
    default_whiny: bool,
) -> TranscodeOptions:
    """Combine a style file entry with CLI overrides.

    Raises:
        ConfigurationError: If the style is unknown or an option is invalid.
    """
    if styles_file is not None:
        base = load_styles(styles_file).get(style or DEFAULT_STYLE)
    else:
        base = TranscodeOptions(style=style or DEFAULT_STYLE)

    if whiny is None:
        whiny = base.whiny if "whiny" in base.model_fields_set else default_whiny

    return base.with_overrides(
        geometry=geometry,
        format=output_format,
        time=seek,
        whiny=whiny,
    )


def _write_output(result, source_path: Path, output: Path) -> None:
    """Copy the orchestration result to output and remove its temp file."""
    output.parent.mkdir(parents=True, exist_ok=True)
    result_path = Path(result.name)
    result.close()
    if result_path == source_path:
        shutil.copyfile(source_path, output)
        return
    shutil.move(str(result_path), output)


@click.command("transcode")
@click.argument("source", type=click.Path(exists=False, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Where to write the transcoded file.",
)
@click.option("--style", "-s", default=None, help="Style name (default: 'default').")
@click.option(
    "--styles-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file defining named styles.",
)
@click.option("--geometry", "-g", default=None, help="Geometry such as 320x240#.")
@click.option(
    "--format", "-f", "output_format", default=None, help="Output format (e.g. mp4)."
)
@click.option(
    "--time",
    "seek",
    type=click.FloatRange(min=0),
    default=None,
    help="Seek offset in seconds for still-image formats.",
)
@click.option(
    "--whiny/--no-whiny",
    default=None,
    help="Fail on transcode errors, or return the source unchanged.",
)
@click.option(
    "--attachment",
    "-a",
    "attachment_id",
    default=None,
    help="Attachment ID whose metadata should record this style.",
)
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Metadata database (default: ~/.mto/metadata.db).",
)
@click.pass_context
def transcode_command(
    ctx: click.Context,
    source: Path,
    output: Path,
    style: str | None,
    styles_file: Path | None,
    geometry: str | None,
    output_format: str | None,
    seek: float | None,
    whiny: bool | None,
    attachment_id: str | None,
    db_path: Path | None,
) -> None:
    """Transcode SOURCE into a single style.

    Files that ffprobe cannot read are copied to OUTPUT unchanged. With
    --attachment, the style's source and output metadata are merged into
    the attachment's stored metadata.
    """
    if not source.exists():
        click.echo(f"Error: File not found: {source}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    config_path = (ctx.obj or {}).get("config_path")
    config = get_config(config_path=config_path, database_path=db_path)

    try:
        options = _resolve_options(
            styles_file,
            style,
            geometry,
            output_format,
            seek,
            whiny,
            config.transcode.whiny,
        )
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)
    logger.debug("Resolved options for style %s: %r", options.style, options)

    try:
        introspector = FFprobeIntrospector(timeout=config.transcode.probe_timeout)
    except ToolNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)

    attachment = None
    if attachment_id:
        store = SqliteMetadataStore(config.metadata.database_path, attachment_id)
        attachment = AttachmentMetadata(store, field=config.metadata.field)

    with open(source, "rb") as src:
        orchestrator = TranscodeOrchestrator(
            src,
            options,
            introspector=introspector,
            command_factory=FFmpegCommand,
            attachment=attachment,
            temp_dir=config.transcode.temp_directory,
        )
        try:
            result = orchestrator.run()
        except TranscodeExecutionError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(ExitCode.OPERATION_FAILED)
        except ToolNotFoundError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(ExitCode.TOOL_NOT_AVAILABLE)

        if result is src:
            _write_output(src, source, output)
            click.echo(f"Transcode failed; copied {source.name} to {output}")
            return

    _write_output(result, source, output)

    if orchestrator.state is TranscodeState.DONE and orchestrator.record is None:
        click.echo(f"Unsupported media; copied {source.name} to {output}")
    else:
        click.echo(f"Transcoded {source.name} [{options.style}] to {output}")
        if orchestrator.record and orchestrator.record.output:
            dims = orchestrator.record.output
            click.echo(f"  Output: {dims.width}x{dims.height}")
