"""CLI module for the Media Transcode Orchestrator."""

from pathlib import Path

import click

from mto import __version__


def _configure_logging(
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from the config file with CLI overrides applied."""
    from dataclasses import replace

    from mto.config import get_config
    from mto.feature_flags import log_enabled_flags
    from mto.logging import configure_logging

    base = get_config(config_path=config_path).logging
    overrides = {}
    if log_level is not None:
        overrides["level"] = log_level
    if log_file is not None:
        overrides["file"] = log_file
    if log_json:
        overrides["format"] = "json"

    configure_logging(replace(base, **overrides))
    log_enabled_flags()


@click.group()
@click.version_option(__version__, prog_name="mto")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config file (default: ~/.mto/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level from config.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write logs to this file.",
)
@click.option("--log-json", is_flag=True, help="Use JSON log format.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Media Transcode Orchestrator - transcode uploads into named styles."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    _configure_logging(config_path, log_level, log_file, log_json)


def _register_commands() -> None:
    from mto.cli.inspect import inspect_command
    from mto.cli.meta import meta_command
    from mto.cli.transcode import transcode_command

    main.add_command(transcode_command)
    main.add_command(inspect_command)
    main.add_command(meta_command)


_register_commands()
