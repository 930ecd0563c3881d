"""
Tests for the logging module.

Tests verify:
- configure_logging sets up structlog
- LogContext binds and unbinds context variables
"""

from __future__ import annotations

import structlog

from route_spine.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


class TestConfigureLogging:
    def test_configures_structlog(self):
        configure_logging(level="WARNING", json_format=True, service="route-tests")
        assert structlog.is_configured()

    def test_console_format(self):
        configure_logging(level="DEBUG", json_format=False)
        assert structlog.is_configured()

    def test_get_logger(self):
        logger = get_logger(__name__)
        assert hasattr(logger, "info")


class TestContext:
    def teardown_method(self):
        clear_context()

    def test_bind_and_unbind(self):
        bind_context(uri="/a")
        assert structlog.contextvars.get_contextvars()["uri"] == "/a"
        unbind_context("uri")
        assert "uri" not in structlog.contextvars.get_contextvars()

    def test_log_context_scoped(self):
        with LogContext(uri="/a/b", locale="en"):
            context = structlog.contextvars.get_contextvars()
            assert context["uri"] == "/a/b"
            assert context["locale"] == "en"
        assert "uri" not in structlog.contextvars.get_contextvars()

    def test_clear(self):
        bind_context(locale="en")
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
