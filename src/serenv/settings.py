"""Runtime settings for serenv.

Settings come from ``SERENV_*`` environment variables and are overridden by
command-line options. No ``.env`` file is loaded: doing so would change the
very environment that ``serenv save`` captures.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from serenv.env.persistence import DEFAULT_SNAPSHOT_FILE
from serenv.errors import ConfigurationError


ENV_SNAPSHOT_PATH = "SERENV_SNAPSHOT_PATH"
ENV_LOG_LEVEL = "SERENV_LOG_LEVEL"
ENV_LOG_FORMAT = "SERENV_LOG_FORMAT"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SerenvSettings(BaseModel):
    """Resolved settings.

    Attributes:
        snapshot_path: Where the snapshot artifact is read and written.
        log_level: Level for the ``serenv`` logger.
        log_format: "human" or "json".
    """

    model_config = ConfigDict(frozen=True)

    snapshot_path: Path = Path(DEFAULT_SNAPSHOT_FILE)
    log_level: str = "WARNING"
    log_format: Literal["human", "json"] = "human"

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(_LOG_LEVELS)}")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SerenvSettings:
        """Build settings from ``SERENV_*`` variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``).

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        if env.get(ENV_SNAPSHOT_PATH):
            values["snapshot_path"] = env[ENV_SNAPSHOT_PATH]
        if env.get(ENV_LOG_LEVEL):
            values["log_level"] = env[ENV_LOG_LEVEL]
        if env.get(ENV_LOG_FORMAT):
            values["log_format"] = env[ENV_LOG_FORMAT].lower()
        return cls.build(**values)

    @classmethod
    def build(cls, **values: object) -> SerenvSettings:
        """Validate values, converting pydantic errors to ConfigurationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            key = str(first["loc"][0]) if first["loc"] else None
            raise ConfigurationError(
                f"Invalid setting {key}: {first['msg']}",
                config_key=key,
                hint="Check the SERENV_* environment variables",
            ) from e

    def with_overrides(self, **overrides: object) -> SerenvSettings:
        """Return a copy with non-None overrides applied and re-validated."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return self.build(**values)
