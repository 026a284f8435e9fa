"""CLI extract command: write an image for a video to disk."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from stillframe.cli.exit_codes import ExitCode
from stillframe.config.models import StillframeConfig
from stillframe.core.cancellation import CancellationToken
from stillframe.domain.enums import ImageType
from stillframe.domain.models import MediaItem
from stillframe.introspector.interface import MediaIntrospectionError
from stillframe.introspector.resolver import build_resolver
from stillframe.iso.interface import IsoMountError
from stillframe.providers.registry import (
    ImageFetchResult,
    build_iso_manager,
    get_default_registry,
)
from stillframe.tools.detection import ToolNotFoundError

logger = logging.getLogger(__name__)


def default_output_path(item: MediaItem, image_type: ImageType, extension: str) -> Path:
    """Output file in the current directory, e.g. "Movie-primary.jpg"."""
    stem = Path(item.name).stem or "image"
    return Path.cwd() / f"{stem}-{image_type.value}{extension}"


def _exit_code_for_failures(result: ImageFetchResult) -> ExitCode:
    if any(f.error_type == ToolNotFoundError.__name__ for f in result.failures):
        return ExitCode.TOOL_NOT_AVAILABLE
    return ExitCode.EXTRACTION_FAILED


async def run_extract(
    config: StillframeConfig,
    source: str,
    output: Path | None,
    image_type: ImageType,
    provider_name: str | None,
) -> ExitCode:
    """Resolve source, run the provider pipeline and write the image.

    Returns:
        Exit code for the command.
    """
    iso_manager = build_iso_manager(config)
    resolver = build_resolver(config, iso_manager)
    registry = get_default_registry(config, iso_manager)

    if provider_name is not None and registry.get(provider_name) is None:
        names = ", ".join(p.name for p in registry.get_all())
        click.echo(
            f"Error: Unknown provider '{provider_name}'. Known: {names}", err=True
        )
        return ExitCode.INVALID_ARGUMENTS

    token = CancellationToken()
    try:
        item = await resolver.resolve(source, token)
    except FileNotFoundError:
        click.echo(f"Error: Source not found: {source}", err=True)
        return ExitCode.SOURCE_NOT_FOUND
    except ToolNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        return ExitCode.TOOL_NOT_AVAILABLE
    except (MediaIntrospectionError, IsoMountError) as e:
        click.echo(f"Error: Could not read {source}", err=True)
        click.echo(f"Reason: {e}", err=True)
        return ExitCode.EXTRACTION_FAILED

    result = await registry.fetch_image(item, image_type, token, provider_name)
    response = result.response

    if not response.has_image or response.stream is None or response.format is None:
        if result.failures:
            for failure in result.failures:
                click.echo(f"Error: {failure.provider}: {failure.error}", err=True)
            return _exit_code_for_failures(result)
        click.echo(f"No {image_type.value} image available for {source}", err=True)
        return ExitCode.NO_IMAGE

    data = response.stream.read()
    if output is not None and str(output) == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return ExitCode.SUCCESS

    target = output or default_output_path(item, image_type, response.format.extension)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as e:
        click.echo(f"Error: Cannot write {target}: {e}", err=True)
        return ExitCode.GENERAL_ERROR

    click.echo(f"Wrote {target} ({len(data)} bytes, {result.provider})")
    return ExitCode.SUCCESS


@click.command("extract")
@click.argument("source")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file ('-' for stdout). Default: <name>-<type>.<ext> here.",
)
@click.option(
    "--type",
    "image_type",
    type=click.Choice([t.value for t in ImageType], case_sensitive=False),
    default=ImageType.PRIMARY.value,
    show_default=True,
    help="Kind of image to produce.",
)
@click.option(
    "--provider",
    "provider_name",
    type=str,
    default=None,
    help="Only ask this provider (e.g. 'Screen Grabber').",
)
@click.pass_context
def extract_command(
    ctx: click.Context,
    source: str,
    output: Path | None,
    image_type: str,
    provider_name: str | None,
) -> None:
    """Produce an image for SOURCE.

    SOURCE is a video file, a DVD/Blu-ray folder, an ISO image or an
    http(s) URL. Local artwork next to the video is used when present;
    otherwise a frame is grabbed from the video.

    \b
    Examples:
        stillframe extract movie.mkv
        stillframe extract /media/Film.BluRay.iso -o poster.jpg
        stillframe extract movie.mkv --provider "Screen Grabber" -o -
    """
    config: StillframeConfig = ctx.obj["config"]
    try:
        exit_code = asyncio.run(
            run_extract(
                config, source, output, ImageType(image_type.lower()), provider_name
            )
        )
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(ExitCode.INTERRUPTED)
    sys.exit(exit_code)
