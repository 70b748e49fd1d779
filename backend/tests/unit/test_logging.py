"""Unit tests for request-scoped logging context."""
import structlog

from codescape.core.logging import bind_request_context, clear_request_context


class TestRequestContext:
    """Test bind_request_context and clear_request_context."""

    def teardown_method(self):
        clear_request_context()

    def test_bind_replaces_previous_request(self):
        bind_request_context("req-1", "10.0.0.1")
        bind_request_context("req-2", "10.0.0.2")

        assert structlog.contextvars.get_contextvars() == {
            "request_id": "req-2",
            "client_host": "10.0.0.2",
        }

    def test_clear(self):
        bind_request_context("req-1", "10.0.0.1")

        clear_request_context()

        assert structlog.contextvars.get_contextvars() == {}
