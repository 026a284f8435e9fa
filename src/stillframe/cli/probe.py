"""CLI probe command: show how an item would be processed."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click

from stillframe.cli.exit_codes import ExitCode
from stillframe.config.models import StillframeConfig
from stillframe.domain.enums import VideoType
from stillframe.domain.models import MediaItem
from stillframe.encoder.input_args import get_input_argument
from stillframe.introspector.interface import MediaIntrospectionError
from stillframe.introspector.resolver import build_resolver
from stillframe.iso.interface import IsoMountError
from stillframe.providers.eligibility import (
    compute_image_offset,
    resolve_protocol,
    skip_reason,
    supports_extraction,
)
from stillframe.providers.registry import build_iso_manager
from stillframe.tools.detection import ToolNotFoundError


def describe_item(item: MediaItem) -> dict[str, Any]:
    """Plain-data description of an item and its extraction plan."""
    protocol = resolve_protocol(item)
    # ISO input arguments depend on a mount that only exists during extraction
    input_argument = (
        None
        if item.video_type == VideoType.ISO
        else get_input_argument(
            item.path, protocol, None, item.playable_stream_file_names
        )
    )
    return {
        "path": item.path,
        "location_type": item.location_type.value,
        "video_type": item.video_type.value,
        "iso_type": item.iso_type.value if item.iso_type else None,
        "runtime_seconds": (
            item.runtime.total_seconds() if item.runtime is not None else None
        ),
        "default_video_stream_index": item.default_video_stream_index,
        "video_3d_format": (
            item.video_3d_format.value if item.video_3d_format else None
        ),
        "playable_stream_files": list(item.playable_stream_file_names),
        "date_modified": item.date_modified.isoformat(),
        "supported": supports_extraction(item),
        "skip_reason": skip_reason(item),
        "image_offset_seconds": compute_image_offset(item).total_seconds(),
        "protocol": protocol.value,
        "input_argument": input_argument,
    }


def format_human(info: dict[str, Any]) -> str:
    """Render describe_item() output as aligned "key: value" lines."""
    width = max(len(key) for key in info)
    lines = []
    for key, value in info.items():
        if isinstance(value, list):
            value = ", ".join(value) if value else "-"
        elif value is None:
            value = "-"
        lines.append(f"{key.replace('_', ' '):<{width}}  {value}")
    return "\n".join(lines)


@click.command("probe")
@click.argument("source")
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
@click.pass_context
def probe_command(ctx: click.Context, source: str, as_json: bool) -> None:
    """Resolve SOURCE and show the item and its extraction plan."""
    config: StillframeConfig = ctx.obj["config"]
    iso_manager = build_iso_manager(config)
    resolver = build_resolver(config, iso_manager)

    try:
        item = asyncio.run(resolver.resolve(source))
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(ExitCode.INTERRUPTED)
    except FileNotFoundError:
        click.echo(f"Error: Source not found: {source}", err=True)
        sys.exit(ExitCode.SOURCE_NOT_FOUND)
    except ToolNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)
    except (MediaIntrospectionError, IsoMountError) as e:
        click.echo(f"Error: Could not read {source}", err=True)
        click.echo(f"Reason: {e}", err=True)
        sys.exit(ExitCode.EXTRACTION_FAILED)

    info = describe_item(item)
    if as_json:
        click.echo(json.dumps(info, indent=2))
    else:
        click.echo(format_human(info))
