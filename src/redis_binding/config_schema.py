"""
JSON schemas for configuration validation.
"""

# Component properties arrive from the host as a flat string-to-string map.
PROPERTIES_SCHEMA = {
    "type": "object",
    "additionalProperties": {"type": "string"},
}

LOGGING_SCHEMA = {
    "type": "object",
    "properties": {
        "level": {"type": "string", "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
        "format": {"type": "string", "enum": ["text", "json"]},
        "log_invocations": {"type": "boolean"},
        "redact_secrets": {"type": "boolean"},
    },
    "additionalProperties": False,
}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "logging": LOGGING_SCHEMA,
        "redis": PROPERTIES_SCHEMA,
    },
    "additionalProperties": False,
}
