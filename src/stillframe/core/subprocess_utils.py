"""Subprocess utilities for external tool invocation.

This module provides the async subprocess wrapper used across the codebase
for consistent timeout handling, cancellation, and logging when invoking
external tools like ffmpeg, ffprobe, fuseiso and fusermount.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from stillframe.core.cancellation import CancellationToken, run_cancellable

logger = logging.getLogger(__name__)


async def run_command(
    args: list[str | Path],
    token: CancellationToken | None = None,
    timeout: float | None = None,
) -> tuple[bytes, str, int]:
    """Run an external command and collect its output.

    stdout is returned as raw bytes (ffmpeg writes images to it); stderr is
    decoded as UTF-8 with error replacement.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        token: Optional cancellation token. Firing it kills the process.
        timeout: Timeout in seconds, or None for no limit.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        asyncio.TimeoutError: If the command times out. The process has been
            killed and reaped.
        OperationCancelledError: If the token fired. The process has been
            killed and reaped.
        asyncio.CancelledError: If the calling task was cancelled.
        FileNotFoundError: If the executable does not exist.
    """
    str_args = [str(arg) for arg in args]
    command_name = str_args[0].split("/")[-1] if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()
    process = await asyncio.create_subprocess_exec(
        *str_args,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout, stderr = await run_cancellable(
            asyncio.wait_for(process.communicate(), timeout=timeout), token
        )
    except asyncio.TimeoutError:
        elapsed = time.monotonic() - start_time
        logger.warning(
            "Command timed out after %ss: %s",
            timeout,
            " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
            extra={
                "command": command_name,
                "timeout_seconds": timeout,
                "elapsed_seconds": round(elapsed, 3),
            },
        )
        await _kill(process)
        raise
    except asyncio.CancelledError:
        logger.debug("Command cancelled, killing %s", command_name)
        await _kill(process)
        raise

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": process.returncode,
        },
    )

    return (
        stdout or b"",
        (stderr or b"").decode("utf-8", errors="replace"),
        process.returncode if process.returncode is not None else -1,
    )


async def _kill(process: asyncio.subprocess.Process) -> None:
    """Kill a process if it is still running and reap it."""
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass  # Exited between the check and the kill
    await process.wait()
