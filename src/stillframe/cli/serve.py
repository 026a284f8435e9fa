"""CLI serve command for daemon mode."""

from __future__ import annotations

import asyncio
import errno
import logging
import os
import sys

import click

from stillframe.cli.exit_codes import ExitCode
from stillframe.config.models import StillframeConfig

logger = logging.getLogger(__name__)


async def run_server(config: StillframeConfig, bind: str, port: int) -> int:
    """Run the daemon until SIGTERM/SIGINT.

    Returns:
        Exit code (0 for clean shutdown, non-zero for errors).
    """
    from aiohttp import web

    from stillframe.introspector.resolver import build_resolver
    from stillframe.providers.registry import build_iso_manager, get_default_registry
    from stillframe.server.app import create_app
    from stillframe.server.lifecycle import DaemonLifecycle
    from stillframe.server.signals import remove_signal_handlers, setup_signal_handlers

    shutdown_timeout = config.server.shutdown_timeout
    lifecycle = DaemonLifecycle(shutdown_timeout=shutdown_timeout)
    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    setup_signal_handlers(loop, lifecycle, shutdown_event)

    iso_manager = build_iso_manager(config)
    app = create_app(
        build_resolver(config, iso_manager),
        get_default_registry(config, iso_manager),
        lifecycle,
    )

    # Cancel the handler (and its extraction) when the client disconnects
    runner = web.AppRunner(app, handler_cancellation=True)
    await runner.setup()

    try:
        site = web.TCPSite(runner, bind, port)
        await site.start()

        logger.info(
            "stillframe daemon started on http://%s:%d (PID %d)",
            bind,
            port,
            os.getpid(),
        )
        logger.info("Press Ctrl+C or send SIGTERM to stop")

        await shutdown_event.wait()

        logger.info(
            "Shutdown initiated, waiting up to %.1fs for %d request(s)",
            shutdown_timeout,
            lifecycle.active_requests,
        )
        deadline = loop.time() + shutdown_timeout
        while lifecycle.active_requests and loop.time() < deadline:
            await asyncio.sleep(0.1)
        lifecycle.cancel_active()

    except OSError as e:
        if e.errno == errno.EADDRINUSE:
            logger.error("Port %d is already in use", port)
        elif e.errno == errno.EADDRNOTAVAIL:
            logger.error("Cannot bind to address %s", bind)
        else:
            logger.error("Server error: %s", e)
        return 1
    finally:
        remove_signal_handlers(loop)
        await runner.cleanup()
        logger.info("stillframe daemon stopped")

    return 0


@click.command("serve")
@click.option(
    "--bind",
    type=str,
    default=None,
    help="Address to bind to (default: 127.0.0.1).",
)
@click.option(
    "--port",
    "-p",
    type=click.IntRange(1, 65535),
    default=None,
    help="Port to bind to (default: 8322).",
)
@click.pass_context
def serve_command(ctx: click.Context, bind: str | None, port: int | None) -> None:
    """Run the HTTP image daemon.

    Serves GET /health and GET /api/image?path=...&type=primary.
    Handles graceful shutdown on SIGTERM or SIGINT.

    \b
    Examples:
        stillframe serve
        stillframe serve --port 9000
        stillframe serve --bind 0.0.0.0
    """
    config: StillframeConfig = ctx.obj["config"]
    server_bind = bind if bind is not None else config.server.bind
    server_port = port if port is not None else config.server.port

    if server_port < 1024:
        logger.warning("Port %d is privileged and may require root", server_port)

    logger.info(
        "Starting stillframe daemon (bind=%s, port=%d)", server_bind, server_port
    )

    try:
        exit_code = asyncio.run(run_server(config, server_bind, server_port))
    except KeyboardInterrupt:
        logger.info("Interrupted before server started")
        sys.exit(ExitCode.INTERRUPTED)
    sys.exit(exit_code)
