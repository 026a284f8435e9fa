"""Configuration loader with precedence handling.

Precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (STILLFRAME_*)
3. Config file (~/.stillframe/config.toml, or STILLFRAME_CONFIG_PATH)
4. Default values
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path

from pydantic import ValidationError

from stillframe.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from stillframe.config.env import EnvReader
from stillframe.config.models import StillframeConfig
from stillframe.config.schema import ConfigFileModel, format_validation_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".stillframe"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# path -> (validated file model, mtime)
_config_cache: dict[Path, tuple[ConfigFileModel, float]] = {}
_config_cache_lock = threading.Lock()


class ConfigError(Exception):
    """The configuration file or a configured value is invalid."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)


def get_default_config_path() -> Path:
    """Get the config file path, honoring STILLFRAME_CONFIG_PATH."""
    env_path = os.environ.get("STILLFRAME_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def _parse_config_file(path: Path) -> ConfigFileModel:
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return ConfigFileModel()

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", path) from e

    try:
        model = ConfigFileModel.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid config file {path}: {format_validation_error(e)}", path
        ) from e

    logger.debug("Loaded config from %s", path)
    return model


def load_config_file(path: Path | None = None) -> ConfigFileModel:
    """Load and validate the TOML config file.

    Results are cached and reloaded when the file's mtime changes. A
    missing file yields an empty model.

    Args:
        path: Path to config file. If None, uses the default location.

    Returns:
        Validated config file model.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        current_mtime = 0.0

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        model = _parse_config_file(path)
        _config_cache[path] = (model, current_mtime)
        return model


def clear_config_cache() -> None:
    """Drop cached config files so the next load rereads them."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    image_width: int | None = None,
    server_bind: str | None = None,
    server_port: int | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
) -> StillframeConfig:
    """Get the configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides STILLFRAME_CONFIG_PATH).
        ffmpeg_path: CLI override for the ffmpeg path.
        ffprobe_path: CLI override for the ffprobe path.
        image_width: CLI override for the output width.
        server_bind: CLI override for the daemon bind address.
        server_port: CLI override for the daemon port.
        env_reader: EnvReader to use instead of os.environ.

    Returns:
        Merged StillframeConfig.

    Raises:
        ConfigError: If the config file or a merged value is invalid.
    """
    reader = env_reader or EnvReader()
    file_config = load_config_file(config_path)

    cli_source = ConfigSource(
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        image_width=image_width,
        server_bind=server_bind,
        server_port=server_port,
    )

    # file < env < cli
    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(cli_source)

    try:
        return builder.build()
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}", config_path) from e
