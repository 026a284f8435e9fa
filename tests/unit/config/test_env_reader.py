"""Tests for EnvReader."""

import logging
from pathlib import Path

from stillframe.config.env import EnvReader


class TestEnvReader:
    """Tests for typed environment access."""

    def test_get_str(self):
        reader = EnvReader(env={"A": "value", "EMPTY": ""})
        assert reader.get_str("A") == "value"
        assert reader.get_str("EMPTY", "default") == "default"
        assert reader.get_str("MISSING") is None

    def test_get_int(self):
        reader = EnvReader(env={"PORT": "9000"})
        assert reader.get_int("PORT") == 9000
        assert reader.get_int("MISSING", 1) == 1

    def test_invalid_int_logs_and_uses_default(self, caplog):
        reader = EnvReader(env={"PORT": "ninety"})

        with caplog.at_level(logging.WARNING):
            assert reader.get_int("PORT", 8322) == 8322
        assert "Invalid integer value for PORT" in caplog.text

    def test_get_float(self):
        reader = EnvReader(env={"T": "2.5", "BAD": "soon"})
        assert reader.get_float("T") == 2.5
        assert reader.get_float("BAD", 1.0) == 1.0

    def test_get_bool(self):
        reader = EnvReader(env={"A": "yes", "B": "0", "C": "ON"})
        assert reader.get_bool("A") is True
        assert reader.get_bool("B") is False
        assert reader.get_bool("C") is True
        assert reader.get_bool("MISSING") is None

    def test_get_path_expands_home(self):
        reader = EnvReader(env={"P": "~/media"})
        assert reader.get_path("P") == Path.home() / "media"

    def test_get_path_must_exist(self, temp_dir: Path):
        reader = EnvReader(
            env={"GOOD": str(temp_dir), "BAD": str(temp_dir / "missing")}
        )
        assert reader.get_path("GOOD", must_exist=True) == temp_dir
        assert reader.get_path("BAD", must_exist=True) is None
