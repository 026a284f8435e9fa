"""Exit codes for CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Configuration errors
    20-29: Source/result errors
    30-39: Tool/dependency errors
    40-49: Operation errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for stillframe CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2  # Ctrl+C / SIGINT
    INVALID_ARGUMENTS = 3

    # Configuration errors (10-19)
    CONFIG_ERROR = 11

    # Source/result errors (20-29)
    SOURCE_NOT_FOUND = 20
    NO_IMAGE = 22

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Operation errors (40-49)
    EXTRACTION_FAILED = 40
