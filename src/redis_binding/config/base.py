"""
Base types for configuration.
"""

from __future__ import annotations

from typing import Literal

RedisType = Literal["node", "cluster"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["text", "json"]


__all__ = ["RedisType", "LogLevel", "LogFormat"]
