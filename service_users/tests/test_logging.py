"""
Unit tests for shared logging configuration.
"""

import structlog

from shared.logging import (
    add_correlation_context, add_service_context, clear_context, configure_logging, set_request_id,
)


class TestLogging:
    """Test cases for the structlog setup."""

    def test_single_timestamp_processor(self):
        configure_logging("users")
        processors = structlog.get_config()["processors"]

        stampers = [p for p in processors if isinstance(p, structlog.processors.TimeStamper)]
        assert len(stampers) == 1
        assert stampers[0].fmt == "iso"
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_correlation_context(self):
        set_request_id("req-1")
        try:
            assert add_correlation_context(None, "info", {"event": "x"})["request_id"] == "req-1"
        finally:
            clear_context()

        assert "request_id" not in add_correlation_context(None, "info", {"event": "x"})

    def test_service_context_from_logger_name(self):
        event = add_service_context(None, "info", {"event": "x", "logger": "users.cache.read_through"})
        assert event["service"] == "users"
