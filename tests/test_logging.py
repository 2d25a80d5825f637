"""
Tests for the structured logging module.
"""

import json
import logging

from redis_binding.logging import (
    InvocationLog,
    JSONFormatter,
    LogContext,
    StructuredLogger,
    Timer,
    redact_secret,
    timed,
    truncate_for_log,
)


class TestLogContext:
    """Test LogContext dataclass."""

    def test_to_dict_skips_unset(self):
        ctx = LogContext(binding="bindings.redis", extra={"custom": "value"})
        d = ctx.to_dict()

        assert d == {"binding": "bindings.redis", "custom": "value"}

    def test_with_update(self):
        ctx = LogContext(binding="bindings.redis")
        updated = ctx.with_update(host="localhost:6379", extra={"k": 1})

        assert updated.binding == "bindings.redis"
        assert updated.host == "localhost:6379"
        assert updated.extra == {"k": 1}
        assert ctx.host is None


class TestInvocationLog:
    """Test invocation records."""

    def test_to_dict(self):
        record = InvocationLog(operation="get", key="x", duration_ms=1.5, response_bytes=2)
        d = record.to_dict()

        assert d["operation"] == "get"
        assert d["key"] == "x"
        assert d["success"] is True
        assert "error" not in d


class TestStructuredLogger:
    """Test StructuredLogger class."""

    def test_create_logger(self):
        logger = StructuredLogger("test.create", level="DEBUG")

        assert logger.name == "test.create"
        assert logger.json_output is True

    def test_bind_returns_extended_copy(self):
        logger = StructuredLogger("test.bind")

        bound = logger.bind(operation="get")

        assert bound.context.operation == "get"
        assert bound.name == logger.name
        assert logger.context.operation is None

    def test_json_records_carry_context(self, caplog):
        logger = StructuredLogger("test.json", level="DEBUG")
        logger = logger.bind(binding="bindings.redis", host="localhost:6379")

        with caplog.at_level(logging.DEBUG, logger="test.json"):
            logger.info("connected", db=0)

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["message"] == "connected"
        assert payload["binding"] == "bindings.redis"
        assert payload["host"] == "localhost:6379"
        assert payload["db"] == 0

    def test_failed_invocation_logged_as_warning(self, caplog):
        logger = StructuredLogger("test.invoke", level="DEBUG")

        with caplog.at_level(logging.DEBUG, logger="test.invoke"):
            logger.log_invocation(InvocationLog(operation="set", key="k", success=False, error="boom"))

        assert caplog.records[-1].levelno == logging.WARNING
        assert json.loads(caplog.records[-1].getMessage())["event_type"] == "invoke"

    def test_log_error_includes_code(self, caplog):
        from redis_binding.errors import MissingKeyError

        logger = StructuredLogger("test.error", level="DEBUG")

        with caplog.at_level(logging.DEBUG, logger="test.error"):
            logger.log_error(MissingKeyError())

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["error_code"] == "ERR_2001"
        assert payload["retryable"] is False

    def test_level_filtering(self, caplog):
        logger = StructuredLogger("test.filter", level="WARNING")

        with caplog.at_level(logging.WARNING, logger="test.filter"):
            logger.debug("hidden")

        assert caplog.records == []

    def test_text_output(self, caplog):
        logger = StructuredLogger("test.text", level="DEBUG", json_output=False)

        with caplog.at_level(logging.DEBUG, logger="test.text"):
            logger.info("closing", host="h")

        assert caplog.records[-1].getMessage() == "closing host=h"


class TestFormatters:
    """Test formatters."""

    def test_json_formatter_merges_payload(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, json.dumps({"message": "m", "a": 1}), None, None)
        out = json.loads(JSONFormatter().format(record))

        assert out["level"] == "INFO"
        assert out["a"] == 1

    def test_json_formatter_plain_message(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "plain", None, None)
        assert json.loads(JSONFormatter().format(record))["message"] == "plain"


class TestUtilities:
    """Test utility functions."""

    def test_timer_basic(self):
        timer = Timer()
        elapsed = timer.stop()
        assert elapsed >= 0
        assert timer.elapsed_ms == elapsed

    def test_timed_context_manager(self):
        with timed() as timer:
            pass
        assert timer.end_time is not None

    def test_redact_secret(self):
        assert redact_secret(None) == "<not set>"
        assert redact_secret("short") == "***"
        assert redact_secret("averylongpassword") == "av...rd"

    def test_truncate_for_log(self):
        assert truncate_for_log("abc") == "abc"
        out = truncate_for_log("x" * 300, max_length=10)
        assert out.startswith("x" * 10)
        assert "300 chars total" in out

    def test_truncate_for_log_default_length(self):
        out = truncate_for_log("k" * 500)
        assert out.startswith("k" * 120 + "...")
        assert "500 chars total" in out
