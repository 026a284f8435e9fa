"""Configuration for stillframe."""

from stillframe.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from stillframe.config.env import EnvReader
from stillframe.config.loader import (
    ConfigError,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from stillframe.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from stillframe.config.models import (
    ExtractionConfig,
    LoggingConfig,
    ServerConfig,
    StillframeConfig,
    ToolPathsConfig,
)

__all__ = [
    "ConfigBuilder",
    "ConfigError",
    "ConfigSource",
    "EnvReader",
    "ExtractionConfig",
    "LoggingConfig",
    "ServerConfig",
    "StillframeConfig",
    "ToolPathsConfig",
    "build_logging_config",
    "clear_config_cache",
    "configure_logging_from_cli",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "source_from_env",
    "source_from_file",
]
