"""Configuration data models for stillframe.

Each section is a plain dataclass validated in __post_init__. The models
are built by ConfigBuilder from layered sources; see config.loader.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
VALID_LOG_FORMATS = frozenset({"text", "json"})


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    None means "look the tool up on PATH".
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None
    fuseiso: Path | None = None
    fusermount: Path | None = None

    def as_dict(self) -> dict[str, Path | None]:
        """Tool name to configured path, as expected by check_tool_availability."""
        return {
            "ffmpeg": self.ffmpeg,
            "ffprobe": self.ffprobe,
            "fuseiso": self.fuseiso,
            "fusermount": self.fusermount,
        }


@dataclass
class ExtractionConfig:
    """Configuration for frame extraction and ISO mounting."""

    # Output width in pixels; height follows the display aspect ratio
    image_width: int = 600

    # Upper bound for one ffmpeg run
    timeout_seconds: float = 120.0

    # Where ISO mount points are created (None = system temp dir)
    mount_root: Path | None = None

    # Upper bound for mounting or unmounting an ISO
    mount_timeout_seconds: float = 60.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.image_width < 2:
            raise ValueError(f"image_width must be >= 2, got {self.image_width}")
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )
        if self.mount_timeout_seconds <= 0:
            raise ValueError(
                "mount_timeout_seconds must be positive, "
                f"got {self.mount_timeout_seconds}"
            )


@dataclass
class ServerConfig:
    """Configuration for `stillframe serve`."""

    bind: str = "127.0.0.1"
    """Network address to bind to. Default localhost."""

    port: int = 8322
    """Port number for the HTTP server."""

    shutdown_timeout: float = 30.0
    """Seconds to wait for in-flight requests on shutdown."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be 1-65535, got {self.port}")
        if self.shutdown_timeout <= 0:
            raise ValueError(
                f"shutdown_timeout must be positive, got {self.shutdown_timeout}"
            )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.level}"
            )
        if self.format.lower() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(VALID_LOG_FORMATS)}, "
                f"got {self.format}"
            )


@dataclass
class StillframeConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
