"""
Configuration for redis-binding.
"""

from .base import LogFormat, LogLevel, RedisType
from .logging import LoggingConfig
from .redis import DEFAULT_PORT, RedisSettings, parse_duration, split_host
from .settings import Settings, load_settings

__all__ = [
    "LogFormat",
    "LogLevel",
    "RedisType",
    "LoggingConfig",
    "RedisSettings",
    "DEFAULT_PORT",
    "parse_duration",
    "split_host",
    "Settings",
    "load_settings",
]
