"""Custom logging handlers for stillframe.

Provides JSONFormatter for structured log output.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName", "item_path", "item_tag"}


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Keys:
    - timestamp: ISO-8601 UTC time of the record
    - level: level name
    - logger: logger name (omitted for the root logger)
    - message: formatted message
    - item: item being processed (from ItemContextFilter), if any
    - context: values passed through ``extra=``
    - exception: formatted traceback, if any
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
        }
        if record.name and record.name != "root":
            entry["logger"] = record.name
        entry["message"] = record.getMessage()

        item_path = getattr(record, "item_path", None)
        if item_path:
            entry["item"] = item_path

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["context"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
