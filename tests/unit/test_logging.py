"""Tests for structured logging middleware."""

import json
import logging

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from scribe.middleware.logging import (
    JsonFormatter,
    LoggingMiddleware,
    TextFormatter,
    configure_logging,
    request_id_var,
)
from scribe.middleware.request_id import RequestIdMiddleware


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_basic_log_format(self):
        """Test basic log formatting."""
        formatter = JsonFormatter()
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg="Test message",
            args=(),
            exc_info=None,
        )
        output = formatter.format(record)
        data = json.loads(output)

        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["logger"] == "test"
        assert "timestamp" in data

    def test_timestamp_format(self):
        """Test timestamp is ISO 8601 with Z suffix."""
        formatter = JsonFormatter()
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg="Test",
            args=(),
            exc_info=None,
        )
        output = formatter.format(record)
        data = json.loads(output)

        assert data["timestamp"].endswith("Z")
        # Should be parseable ISO format
        from datetime import datetime

        datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))

    def test_includes_request_id_from_context(self):
        """Test request ID from context variable."""
        formatter = JsonFormatter()
        token = request_id_var.set("test-request-id")
        try:
            record = logging.LogRecord(
                name="test",
                level=logging.INFO,
                pathname="test.py",
                lineno=1,
                msg="Test",
                args=(),
                exc_info=None,
            )
            output = formatter.format(record)
            data = json.loads(output)

            assert data["request_id"] == "test-request-id"
        finally:
            request_id_var.reset(token)

    def test_includes_extra_fields(self):
        """Test extra fields are included."""
        formatter = JsonFormatter()
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg="Test",
            args=(),
            exc_info=None,
        )
        record.method = "POST"
        record.path = "/prompt-stream"
        record.session_id = "a1b2c3d4e5f6"
        record.chunks = 12
        record.status_code = 200
        record.duration_ms = 1500

        output = formatter.format(record)
        data = json.loads(output)

        assert data["method"] == "POST"
        assert data["path"] == "/prompt-stream"
        assert data["session_id"] == "a1b2c3d4e5f6"
        assert data["chunks"] == 12
        assert data["status_code"] == 200
        assert data["duration_ms"] == 1500

    def test_includes_exception_info(self):
        """Test exception info is included."""
        formatter = JsonFormatter()
        try:
            raise ValueError("Test error")
        except ValueError:
            import sys

            exc_info = sys.exc_info()
            record = logging.LogRecord(
                name="test",
                level=logging.ERROR,
                pathname="test.py",
                lineno=1,
                msg="Error occurred",
                args=(),
                exc_info=exc_info,
            )
            output = formatter.format(record)
            data = json.loads(output)

            assert "exception" in data
            assert "ValueError" in data["exception"]


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_basic_format(self):
        """Test basic text formatting."""
        formatter = TextFormatter()
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg="Test message",
            args=(),
            exc_info=None,
        )
        output = formatter.format(record)

        assert "INFO" in output
        assert "test" in output
        assert "Test message" in output

    def test_includes_request_id_prefix(self):
        """Test request ID is prefixed to message."""
        formatter = TextFormatter()
        token = request_id_var.set("abc12345-1234-1234-1234-123456789012")
        try:
            record = logging.LogRecord(
                name="test",
                level=logging.INFO,
                pathname="test.py",
                lineno=1,
                msg="Test message",
                args=(),
                exc_info=None,
            )
            output = formatter.format(record)

            assert "[abc12345]" in output
        finally:
            request_id_var.reset(token)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_json_format(self):
        """Test JSON format configuration."""
        configure_logging(level="INFO", format="json")
        logger = logging.getLogger()

        assert len(logger.handlers) > 0
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_text_format(self):
        """Test text format configuration."""
        configure_logging(level="INFO", format="text")
        logger = logging.getLogger()

        assert len(logger.handlers) > 0
        assert isinstance(logger.handlers[0].formatter, TextFormatter)

    def test_log_level_setting(self):
        """Test log level is set correctly."""
        configure_logging(level="DEBUG", format="json")
        logger = logging.getLogger()

        assert logger.level == logging.DEBUG


    def test_quiets_third_party_loggers(self):
        configure_logging(level="DEBUG", format="text")
        assert logging.getLogger("httpx").level == logging.WARNING


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


class TestLoggingMiddleware:
    """Tests for LoggingMiddleware."""

    @pytest.fixture
    def handler(self):
        return ListHandler()

    @pytest.fixture
    def client(self, handler):
        """Create test client around an app with both middlewares."""
        access_logger = logging.getLogger("test.access")
        access_logger.setLevel(logging.INFO)
        access_logger.addHandler(handler)

        app = FastAPI()
        app.add_middleware(LoggingMiddleware, logger=access_logger)
        app.add_middleware(RequestIdMiddleware)

        @app.get("/test")
        async def test_endpoint(request: Request):
            return {"request_id": request_id_var.get()}

        @app.get("/error")
        async def error_endpoint():
            raise RuntimeError("Test error")

        yield TestClient(app, raise_server_exceptions=False)
        access_logger.removeHandler(handler)

    def test_logs_request_completion(self, client, handler):
        """Test start and completion lines carry the request id."""
        response = client.get("/test", headers={"X-Request-ID": "trace-0000001"})

        assert response.status_code == 200
        assert response.json() == {"request_id": "trace-0000001"}

        messages = [record.getMessage() for record in handler.records]
        assert messages == ["Request started", "Request completed"]
        completed = handler.records[1]
        assert completed.request_id == "trace-0000001"
        assert completed.status_code == 200
        assert completed.path == "/test"

    def test_logs_error_requests(self, client, handler):
        """Test unhandled errors are logged with their type."""
        response = client.get("/error")

        assert response.status_code == 500
        failed = [r for r in handler.records if r.getMessage() == "Request failed"]
        assert failed
        assert failed[0].error_type == "RuntimeError"

    def test_context_reset_after_request(self, client):
        client.get("/test")
        assert request_id_var.get() is None
