"""Environment variable reader.

EnvReader reads STILLFRAME_* variables with type conversion. It takes an
optional mapping so tests can inject an environment without touching
os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "STILLFRAME_"

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Typed access to environment variables.

    Unset variables return the default. Variables that are set but cannot
    be converted log a warning and also return the default.

    Example:
        reader = EnvReader(env={"STILLFRAME_SERVER_PORT": "9000"})
        reader.get_int("STILLFRAME_SERVER_PORT", 8322)  # 9000
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        value = self._env.get(var)
        if value is None or value == "":
            return default
        return value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        value = self.get_str(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_float(self, var: str, default: float | None = None) -> float | None:
        value = self.get_str(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", var, value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Read a boolean; "true", "1", "yes" and "on" are true."""
        value = self.get_str(var)
        if value is None:
            return default
        return value.strip().lower() in _TRUE_VALUES

    def get_path(
        self, var: str, must_exist: bool = False, default: Path | None = None
    ) -> Path | None:
        """Read a path, expanding ~.

        Args:
            var: Environment variable name.
            must_exist: If True, a path that does not exist is logged and
                the default is returned instead.
            default: Value returned when unset.
        """
        value = self.get_str(var)
        if value is None:
            return default

        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s",
                var,
                value,
            )
            return default
        return path
