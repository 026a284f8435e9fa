"""Pydantic schema for the TOML config file.

Example ~/.stillframe/config.toml:

    [tools]
    ffmpeg = "/usr/local/bin/ffmpeg"

    [extraction]
    image_width = 720
    timeout_seconds = 90

    [server]
    port = 8400

    [logging]
    level = "debug"
    format = "json"
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ToolsModel(BaseModel):
    """[tools] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ffmpeg: Path | None = None
    ffprobe: Path | None = None
    fuseiso: Path | None = None
    fusermount: Path | None = None


class ExtractionModel(BaseModel):
    """[extraction] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    image_width: int | None = Field(default=None, ge=2)
    timeout_seconds: float | None = Field(default=None, gt=0)
    mount_root: Path | None = None
    mount_timeout_seconds: float | None = Field(default=None, gt=0)


class ServerModel(BaseModel):
    """[server] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    bind: str | None = None
    port: int | None = Field(default=None, ge=1, le=65535)
    shutdown_timeout: float | None = Field(default=None, gt=0)


class LoggingModel(BaseModel):
    """[logging] section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: Literal["debug", "info", "warning", "error"] | None = None
    file: Path | None = None
    format: Literal["text", "json"] | None = None
    include_stderr: bool | None = None
    max_bytes: int | None = Field(default=None, ge=0)
    backup_count: int | None = Field(default=None, ge=0)


class ConfigFileModel(BaseModel):
    """Top-level config file layout.

    Every value is optional; unset values fall through to lower-precedence
    sources. Unknown sections and keys are rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    tools: ToolsModel = Field(default_factory=ToolsModel)
    extraction: ExtractionModel = Field(default_factory=ExtractionModel)
    server: ServerModel = Field(default_factory=ServerModel)
    logging: LoggingModel = Field(default_factory=LoggingModel)


def format_validation_error(error: ValidationError) -> str:
    """Format the first pydantic error as 'section.key: message'."""
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return f"{loc}: {msg}"
        return msg
    return str(error)
