"""Configuration builder with explicit layering.

ConfigBuilder composes ConfigSources in increasing precedence and builds a
StillframeConfig, filling unset values with defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from stillframe.config.env import ENV_PREFIX, EnvReader
from stillframe.config.models import (
    ExtractionConfig,
    LoggingConfig,
    ServerConfig,
    StillframeConfig,
    ToolPathsConfig,
)
from stillframe.config.schema import ConfigFileModel


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None means "not specified in this source" and never overrides a value
    from a lower-precedence source.
    """

    # Tool paths
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None
    fuseiso_path: Path | None = None
    fusermount_path: Path | None = None

    # Extraction
    image_width: int | None = None
    extract_timeout: float | None = None
    mount_root: Path | None = None
    mount_timeout: float | None = None

    # Server
    server_bind: str | None = None
    server_port: int | None = None
    server_shutdown_timeout: float | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds StillframeConfig by layering ConfigSources.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_model))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply a source; its non-None values override existing ones."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> StillframeConfig:
        """Build the final config with defaults for unset values.

        Raises:
            ValueError: If a layered value fails model validation.
        """
        tools = ToolPathsConfig(
            ffmpeg=self._get("ffmpeg_path", None),
            ffprobe=self._get("ffprobe_path", None),
            fuseiso=self._get("fuseiso_path", None),
            fusermount=self._get("fusermount_path", None),
        )

        extraction = ExtractionConfig(
            image_width=self._get("image_width", 600),
            timeout_seconds=self._get("extract_timeout", 120.0),
            mount_root=self._get("mount_root", None),
            mount_timeout_seconds=self._get("mount_timeout", 60.0),
        )

        server = ServerConfig(
            bind=self._get("server_bind", "127.0.0.1"),
            port=self._get("server_port", 8322),
            shutdown_timeout=self._get("server_shutdown_timeout", 30.0),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        return StillframeConfig(
            tools=tools,
            extraction=extraction,
            server=server,
            logging=logging_config,
        )


def _expand(path: Path | None) -> Path | None:
    return path.expanduser() if path is not None else None


def source_from_file(file_config: ConfigFileModel) -> ConfigSource:
    """Create a ConfigSource from a validated config file."""
    tools = file_config.tools
    extraction = file_config.extraction
    server = file_config.server
    logging_conf = file_config.logging

    return ConfigSource(
        ffmpeg_path=_expand(tools.ffmpeg),
        ffprobe_path=_expand(tools.ffprobe),
        fuseiso_path=_expand(tools.fuseiso),
        fusermount_path=_expand(tools.fusermount),
        image_width=extraction.image_width,
        extract_timeout=extraction.timeout_seconds,
        mount_root=_expand(extraction.mount_root),
        mount_timeout=extraction.mount_timeout_seconds,
        server_bind=server.bind,
        server_port=server.port,
        server_shutdown_timeout=server.shutdown_timeout,
        logging_level=logging_conf.level,
        logging_file=_expand(logging_conf.file),
        logging_format=logging_conf.format,
        logging_include_stderr=logging_conf.include_stderr,
        logging_max_bytes=logging_conf.max_bytes,
        logging_backup_count=logging_conf.backup_count,
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create a ConfigSource from STILLFRAME_* environment variables."""
    p = ENV_PREFIX
    return ConfigSource(
        ffmpeg_path=reader.get_path(f"{p}FFMPEG_PATH"),
        ffprobe_path=reader.get_path(f"{p}FFPROBE_PATH"),
        fuseiso_path=reader.get_path(f"{p}FUSEISO_PATH"),
        fusermount_path=reader.get_path(f"{p}FUSERMOUNT_PATH"),
        image_width=reader.get_int(f"{p}IMAGE_WIDTH"),
        extract_timeout=reader.get_float(f"{p}EXTRACT_TIMEOUT"),
        mount_root=reader.get_path(f"{p}MOUNT_ROOT"),
        server_bind=reader.get_str(f"{p}SERVER_BIND"),
        server_port=reader.get_int(f"{p}SERVER_PORT"),
        logging_level=reader.get_str(f"{p}LOG_LEVEL"),
        logging_file=reader.get_path(f"{p}LOG_FILE"),
        logging_format=reader.get_str(f"{p}LOG_FORMAT"),
    )
