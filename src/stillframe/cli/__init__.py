"""CLI module for stillframe."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from stillframe.cli.exit_codes import ExitCode
from stillframe.config import ConfigError, StillframeConfig, get_config

logger = logging.getLogger(__name__)


def _configure_logging(
    config: StillframeConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from the loaded config and CLI options."""
    from stillframe.config.logging_factory import configure_logging_from_cli

    configure_logging_from_cli(
        config.logging,
        level=log_level,
        file=log_file,
        format="json" if log_json else None,
    )


@click.group()
@click.version_option(package_name="stillframe")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: ~/.stillframe/config.toml).",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    config_path: Path | None,
) -> None:
    """stillframe - Thumbnails for video files, disc folders and ISO images."""
    ctx.ensure_object(dict)

    # Preserve a config passed in by tests
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(config_path=config_path)
        except ConfigError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(ExitCode.CONFIG_ERROR)

    _configure_logging(ctx.obj["config"], log_level, log_file, log_json)


# Defer import to avoid circular dependency
def _register_commands() -> None:
    from stillframe.cli.extract import extract_command
    from stillframe.cli.probe import probe_command
    from stillframe.cli.serve import serve_command

    main.add_command(extract_command)
    main.add_command(probe_command)
    main.add_command(serve_command)


_register_commands()
