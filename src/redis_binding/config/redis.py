"""
Redis connection settings parsed from component properties.

Property names match the host's component metadata and are looked up
case-insensitively. Durations accept Go-style strings (``500ms``, ``5s``,
``1m``, ``1h``) or a bare number of seconds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

import jsonschema

from ..config_schema import PROPERTIES_SCHEMA
from ..errors import InvalidConfigError
from ..logging import redact_secret
from .base import RedisType

DEFAULT_PORT = 6379

_DURATION_RE = re.compile(r"^(\d+(?:\.\d+)?)(ms|s|m|h)?$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, None: 1.0}
_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off", "")


@dataclass
class RedisSettings:
    """Connection settings for the store client."""

    host: str
    username: str | None = None
    password: str | None = None
    db: int = 0
    redis_type: RedisType = "node"

    # TLS
    enable_tls: bool = False
    client_cert: str | None = None
    client_key: str | None = None

    # Client-side retry policy, applied by redis-py
    max_retries: int = 3
    max_retry_backoff: float = 2.0

    # Timeouts in seconds
    dial_timeout: float = 5.0
    read_timeout: float = 3.0

    pool_size: int | None = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.host:
            raise InvalidConfigError("redis binding: redisHost is required", field="redisHost")
        if self.redis_type not in ("node", "cluster"):
            raise InvalidConfigError(
                f"redis binding: invalid redisType {self.redis_type!r}, must be 'node' or 'cluster'",
                field="redisType",
            )
        if self.db < 0:
            raise InvalidConfigError("redis binding: redisDB cannot be negative", field="redisDB")
        if self.redis_type == "cluster" and self.db != 0:
            raise InvalidConfigError("redis binding: redisDB is not supported in cluster mode", field="redisDB")
        if self.max_retries < 0:
            raise InvalidConfigError("redis binding: maxRetries cannot be negative", field="maxRetries")
        if self.pool_size is not None and self.pool_size <= 0:
            raise InvalidConfigError("redis binding: poolSize must be positive", field="poolSize")
        if bool(self.client_cert) != bool(self.client_key):
            raise InvalidConfigError(
                "redis binding: clientCert and clientKey must be set together", field="clientCert"
            )

    @property
    def addresses(self) -> list[tuple[str, int]]:
        """All host:port pairs named by ``host`` (comma separated in cluster mode)."""
        return [split_host(part) for part in self.host.split(",") if part.strip()]

    def to_dict(self, redact: bool = True) -> dict[str, Any]:
        """Settings as a dictionary, with the password redacted by default."""
        return {
            "host": self.host,
            "username": self.username,
            "password": redact_secret(self.password) if redact else self.password,
            "db": self.db,
            "redis_type": self.redis_type,
            "enable_tls": self.enable_tls,
            "max_retries": self.max_retries,
            "max_retry_backoff": self.max_retry_backoff,
            "dial_timeout": self.dial_timeout,
            "read_timeout": self.read_timeout,
            "pool_size": self.pool_size,
        }

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> RedisSettings:
        """
        Build settings from host-supplied component properties.

        Raises:
            InvalidConfigError: If a property is missing or malformed.
        """
        try:
            jsonschema.validate(instance=dict(properties), schema=PROPERTIES_SCHEMA)
        except jsonschema.ValidationError as e:
            raise InvalidConfigError(
                f"redis binding: component properties must map strings to strings: {e.message}",
                cause=e,
            ) from e

        props = {k.lower(): v for k, v in properties.items()}

        def get(name: str) -> str | None:
            value = props.get(name.lower())
            if value is None:
                return None
            value = value.strip()
            return value or None

        kwargs: dict[str, Any] = {"host": get("redisHost") or ""}

        if (username := get("redisUsername")) is not None:
            kwargs["username"] = username
        # Passwords may legitimately contain surrounding whitespace.
        if props.get("redispassword"):
            kwargs["password"] = props["redispassword"]
        if (db := get("redisDB")) is not None:
            kwargs["db"] = _parse_int("redisDB", db)
        if (redis_type := get("redisType")) is not None:
            kwargs["redis_type"] = redis_type.lower()
        if (tls := get("enableTLS")) is not None:
            kwargs["enable_tls"] = _parse_bool("enableTLS", tls)
        if (cert := get("clientCert")) is not None:
            kwargs["client_cert"] = cert
        if (key := get("clientKey")) is not None:
            kwargs["client_key"] = key
        if (retries := get("maxRetries")) is not None:
            kwargs["max_retries"] = _parse_int("maxRetries", retries)
        if (backoff := get("maxRetryBackoff")) is not None:
            kwargs["max_retry_backoff"] = parse_duration("maxRetryBackoff", backoff)
        if (dial := get("dialTimeout")) is not None:
            kwargs["dial_timeout"] = parse_duration("dialTimeout", dial)
        if (read := get("readTimeout")) is not None:
            kwargs["read_timeout"] = parse_duration("readTimeout", read)
        if (pool := get("poolSize")) is not None:
            kwargs["pool_size"] = _parse_int("poolSize", pool)

        return cls(**kwargs)


def split_host(address: str) -> tuple[str, int]:
    """Split ``host[:port]`` (IPv6 in brackets) into its parts."""
    address = address.strip()
    if address.startswith("["):
        end = address.find("]")
        if end == -1:
            raise InvalidConfigError(f"redis binding: invalid redisHost {address!r}", field="redisHost")
        host, rest = address[1:end], address[end + 1 :]
        port = rest[1:] if rest.startswith(":") else ""
    elif address.count(":") == 1:
        host, port = address.split(":", 1)
    else:
        host, port = address, ""

    if not host:
        raise InvalidConfigError(f"redis binding: invalid redisHost {address!r}", field="redisHost")
    if not port:
        return host, DEFAULT_PORT
    return host, _parse_int("redisHost", port)


def parse_duration(field: str, value: str) -> float:
    """Parse a duration into seconds."""
    match = _DURATION_RE.match(value.strip().lower())
    if not match:
        raise InvalidConfigError(f"redis binding: invalid duration for {field}: {value!r}", field=field)
    amount, unit = match.groups()
    return float(amount) * _DURATION_UNITS[unit]


def _parse_int(field: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise InvalidConfigError(
            f"redis binding: invalid integer for {field}: {value!r}", field=field, cause=e
        ) from e


def _parse_bool(field: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise InvalidConfigError(f"redis binding: invalid boolean for {field}: {value!r}", field=field)


__all__ = ["RedisSettings", "DEFAULT_PORT", "split_host", "parse_duration"]
