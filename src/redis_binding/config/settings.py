"""
Settings master configuration and global helpers.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from ..config_schema import CONFIG_SCHEMA
from ..errors import InvalidConfigError
from .logging import LoggingConfig
from .redis import RedisSettings

# Environment variable suffix -> component property name
_ENV_PROPERTIES = {
    "REDIS_HOST": "redisHost",
    "REDIS_USERNAME": "redisUsername",
    "REDIS_PASSWORD": "redisPassword",
    "REDIS_DB": "redisDB",
    "REDIS_TYPE": "redisType",
    "REDIS_ENABLE_TLS": "enableTLS",
}


@dataclass
class Settings:
    """
    Master configuration for a binding process.

    Holds the logging setup and the component properties handed to the
    binding's ``init``. Can be loaded from environment variables, files, or
    constructed programmatically.
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Component properties, in the host's string-to-string shape
    redis: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, prefix: str = "BINDING_") -> Settings:
        """
        Load settings from environment variables.

        Raises:
            ValueError: If the log level or format is not recognized.

        Example:
            BINDING_LOG_LEVEL=DEBUG
            BINDING_REDIS_HOST=localhost:6379
            BINDING_REDIS_PASSWORD=...
        """
        settings = cls()

        # Rebuilt rather than assigned so LoggingConfig validates the values.
        settings.logging = LoggingConfig(
            level=os.getenv(f"{prefix}LOG_LEVEL", settings.logging.level).upper(),  # type: ignore[arg-type]
            format=os.getenv(f"{prefix}LOG_FORMAT", settings.logging.format).lower(),  # type: ignore[arg-type]
        )

        for suffix, prop in _ENV_PROPERTIES.items():
            if (value := os.getenv(f"{prefix}{suffix}")) is not None:
                settings.redis[prop] = value

        return settings

    @classmethod
    def from_file(cls, path: str | Path) -> Settings:
        """
        Load settings from a TOML or JSON file.

        Args:
            path: Path to configuration file (.toml or .json)
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()

        if suffix == ".toml":
            import tomllib

            with open(path, "rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with open(path) as f:
                data = json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a dictionary validated against the config schema."""
        try:
            jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            raise InvalidConfigError(f"Configuration validation failed: {e.message}", cause=e) from e

        settings = cls()

        if "logging" in data:
            settings.logging = LoggingConfig(**data["logging"])

        if "redis" in data:
            settings.redis = dict(data["redis"])

        return settings

    def redis_settings(self) -> RedisSettings:
        """Parse the component properties into connection settings."""
        return RedisSettings.from_properties(self.redis)

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary, masking the password unless ``redact_secrets`` is off."""
        redact = self.logging.redact_secrets
        return {
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "log_invocations": self.logging.log_invocations,
                "redact_secrets": self.logging.redact_secrets,
            },
            "redis": {
                k: ("***" if redact and k.lower() == "redispassword" else v) for k, v in self.redis.items()
            },
        }


def load_settings(path: str | Path | None = None, prefix: str = "BINDING_") -> Settings:
    """Load settings from ``path`` if given, otherwise from the environment."""
    if path is not None:
        return Settings.from_file(path)
    return Settings.from_env(prefix=prefix)


__all__ = ["Settings", "load_settings"]
