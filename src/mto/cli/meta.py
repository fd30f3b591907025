"""CLI meta command."""

import json
import sys
from pathlib import Path

import click

from mto.cli.exit_codes import ExitCode
from mto.config import get_config
from mto.metadata import AttachmentMetadata, SqliteMetadataStore


@click.command("meta")
@click.argument("attachment_id")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Metadata database (default: ~/.mto/metadata.db).",
)
@click.option("--style", "-s", default=None, help="Show a single style's record.")
@click.pass_context
def meta_command(
    ctx: click.Context,
    attachment_id: str,
    db_path: Path | None,
    style: str | None,
) -> None:
    """Show the stored style metadata of ATTACHMENT_ID as JSON."""
    config = get_config(
        config_path=(ctx.obj or {}).get("config_path"), database_path=db_path
    )
    store = SqliteMetadataStore(config.metadata.database_path, attachment_id)
    mapping = AttachmentMetadata(store, field=config.metadata.field).read_raw()

    if style is not None:
        if style not in mapping:
            click.echo(f"Error: No metadata for style '{style}'", err=True)
            sys.exit(ExitCode.STYLE_NOT_FOUND)
        mapping = mapping[style]

    click.echo(json.dumps(mapping, indent=2, sort_keys=True))
