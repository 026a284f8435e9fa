"""External tool lookup.

Resolves executables for ffmpeg, ffprobe, fuseiso and fusermount from a
configured path or the system PATH.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

# Install hints shown when a required tool cannot be found
TOOL_HINTS: dict[str, str] = {
    "ffmpeg": "Install ffmpeg (e.g. 'apt install ffmpeg' or 'brew install ffmpeg').",
    "ffprobe": "ffprobe ships with ffmpeg; install ffmpeg.",
    "fuseiso": "Install fuseiso (e.g. 'apt install fuseiso') to mount ISO images.",
    "fusermount": "Install the FUSE utilities (e.g. 'apt install fuse3').",
}


class ToolNotFoundError(RuntimeError):
    """A required external tool is not installed or not executable."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        hint = TOOL_HINTS.get(tool_name, "")
        super().__init__(f"Required tool not available: {tool_name}. {hint}".strip())


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    # Try configured path first
    if configured_path:
        if configured_path.is_file():
            return configured_path
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    # Fall back to PATH lookup
    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


def require_tool(name: str, configured_path: Path | None = None) -> Path:
    """Get path to a required tool, raising an error if not available.

    Args:
        name: Tool name.
        configured_path: Optional configured path override.

    Returns:
        Path to the tool executable.

    Raises:
        ToolNotFoundError: If the tool is not available.
    """
    path = find_tool(name, configured_path)
    if path is None:
        raise ToolNotFoundError(name)
    return path


def check_tool_availability(
    configured: dict[str, Path | None] | None = None,
) -> dict[str, bool]:
    """Check which external tools are available.

    Args:
        configured: Optional mapping of tool name to configured path.

    Returns:
        Dict mapping tool name to availability.
    """
    configured = configured or {}
    return {
        name: find_tool(name, configured.get(name)) is not None for name in TOOL_HINTS
    }
