"""Tests for configuration dataclasses and the file schema."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from stillframe.config.models import (
    ExtractionConfig,
    LoggingConfig,
    ServerConfig,
    StillframeConfig,
    ToolPathsConfig,
)
from stillframe.config.schema import ConfigFileModel, format_validation_error


class TestDefaults:
    """Default values match the documented behaviour."""

    def test_defaults(self):
        config = StillframeConfig()

        assert config.extraction.image_width == 600
        assert config.extraction.timeout_seconds == 120.0
        assert config.server.bind == "127.0.0.1"
        assert config.server.port == 8322
        assert config.logging.level == "info"
        assert config.logging.format == "text"
        assert config.tools.as_dict() == {
            "ffmpeg": None,
            "ffprobe": None,
            "fuseiso": None,
            "fusermount": None,
        }


class TestValidation:
    """__post_init__ validation."""

    def test_image_width_too_small(self):
        with pytest.raises(ValueError, match="image_width"):
            ExtractionConfig(image_width=1)

    @pytest.mark.parametrize("field", ["timeout_seconds", "mount_timeout_seconds"])
    def test_timeouts_must_be_positive(self, field):
        with pytest.raises(ValueError, match=field):
            ExtractionConfig(**{field: 0})

    @pytest.mark.parametrize("port", [0, 65536])
    def test_port_range(self, port):
        with pytest.raises(ValueError, match="port"):
            ServerConfig(port=port)

    def test_shutdown_timeout(self):
        with pytest.raises(ValueError, match="shutdown_timeout"):
            ServerConfig(shutdown_timeout=-1)

    def test_log_level(self):
        with pytest.raises(ValueError, match="level"):
            LoggingConfig(level="verbose")
        assert LoggingConfig(level="DEBUG").level == "DEBUG"

    def test_log_format(self):
        with pytest.raises(ValueError, match="format"):
            LoggingConfig(format="xml")

    def test_tool_paths_as_dict(self):
        tools = ToolPathsConfig(ffmpeg=Path("/opt/ffmpeg"))
        assert tools.as_dict()["ffmpeg"] == Path("/opt/ffmpeg")


class TestConfigFileModel:
    """pydantic schema for config.toml."""

    def test_empty(self):
        model = ConfigFileModel.model_validate({})
        assert model.extraction.image_width is None

    def test_sections(self):
        model = ConfigFileModel.model_validate(
            {
                "tools": {"ffmpeg": "/opt/ffmpeg"},
                "extraction": {"image_width": 320},
                "server": {"port": 9000},
                "logging": {"level": "debug", "format": "json"},
            }
        )

        assert model.tools.ffmpeg == Path("/opt/ffmpeg")
        assert model.extraction.image_width == 320
        assert model.server.port == 9000
        assert model.logging.format == "json"

    def test_unknown_key_is_rejected(self):
        with pytest.raises(ValidationError):
            ConfigFileModel.model_validate({"server": {"hostname": "x"}})

    def test_unknown_section_is_rejected(self):
        with pytest.raises(ValidationError):
            ConfigFileModel.model_validate({"database": {}})

    def test_format_validation_error_has_location(self):
        with pytest.raises(ValidationError) as exc_info:
            ConfigFileModel.model_validate({"server": {"port": 70000}})

        message = format_validation_error(exc_info.value)
        assert message.startswith("server.port: ")
