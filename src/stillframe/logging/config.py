"""Root logger setup for the CLI and the daemon.

Records carry the item being processed (see stillframe.logging.context):
text output prefixes the item's file name, JSON output adds an item_path
field. configure_logging() is called once per process.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from stillframe.logging.context import ItemContextFilter
from stillframe.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from stillframe.config.models import LoggingConfig

# item_tag is "[Movie.mkv] " inside item_context(), empty otherwise
TEXT_FORMAT = "%(asctime)s - %(item_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def build_formatter(config: LoggingConfig) -> logging.Formatter:
    """JSON or text formatter, per config.format."""
    if config.format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Rotating handler for config.file, or None if it cannot be opened."""
    if not config.file:
        return None

    log_path = Path(config.file).expanduser()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            log_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not up yet
        sys.stderr.write(f"Warning: Could not open log file {log_path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to config.

    Logs go to config.file when it can be opened, and to stderr when
    include_stderr is set or there is no usable file. Every handler gets
    the item context filter.

    Args:
        config: Logging configuration.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = []
    file_handler = _open_log_file(config)
    if file_handler is not None:
        handlers.append(file_handler)
    if config.include_stderr or file_handler is None:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = build_formatter(config)
    item_filter = ItemContextFilter()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(item_filter)
        root_logger.addHandler(handler)
