"""Tests for telemetry module."""

import io
import json
import logging

import pytest

from eleven_mcp.telemetry import (
    CallContext,
    KeyRedactor,
    call_context,
    configure_logging,
    current_call_context,
    get_logger,
    operation_scope,
    parse_level,
)


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    configure_logging("DEBUG", "json", stream=stream)
    yield stream
    configure_logging("INFO")


def last_record(stream: io.StringIO) -> dict:
    return json.loads(stream.getvalue().strip().splitlines()[-1])


class TestParseLevel:
    """Tests for parse_level."""

    def test_names(self) -> None:
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("WARNING") == logging.WARNING
        assert parse_level(logging.ERROR) == logging.ERROR

    def test_unknown_means_info(self) -> None:
        assert parse_level("nonsense") == logging.INFO


class TestCallContext:
    """Tests for the tool call context."""

    def test_as_fields_skips_empty(self) -> None:
        assert CallContext().as_fields() == {}
        ctx = CallContext(request_id="r1", tool="transcribe")
        assert ctx.as_fields() == {"request_id": "r1", "tool": "transcribe"}

    def test_bind(self) -> None:
        ctx = CallContext(tool="list_voices").bind(page=2)
        assert ctx.as_fields() == {"tool": "list_voices", "page": 2}

    def test_scoped_to_block(self) -> None:
        with call_context("clone_voice") as ctx:
            assert current_call_context() is ctx
            assert ctx.request_id
        assert current_call_context().as_fields() == {}


class TestKeyRedactor:
    """Tests for key redaction."""

    def test_elevenlabs_key(self) -> None:
        text = KeyRedactor().redact("using sk_0123456789abcdef0123456789abcdef for request")
        assert "0123456789abcdef" not in text
        assert "***REDACTED***" in text

    def test_header_and_env(self) -> None:
        redactor = KeyRedactor()
        assert "secretvalue" not in redactor.redact("headers={'xi-api-key': 'secretvalue'}")
        assert "secretvalue" not in redactor.redact("ELEVENLABS_API_KEY=secretvalue")

    def test_fields(self) -> None:
        fields = KeyRedactor().redact_fields(
            {"api_key": "abc", "nested": {"token": "t"}, "voice": "Rachel"}
        )
        assert fields["api_key"] == "***REDACTED***"
        assert fields["nested"]["token"] == "***REDACTED***"
        assert fields["voice"] == "Rachel"


class TestFieldLogger:
    """Tests for logger output."""

    def test_json_record_with_fields_and_context(self, log_stream: io.StringIO) -> None:
        logger = get_logger("eleven_mcp.test")
        with call_context("text_to_speech", request_id="req1"):
            logger.info("Operation finished", operation="speech", bytes=20480)

        record = last_record(log_stream)
        assert record["msg"] == "Operation finished"
        assert record["level"] == "INFO"
        assert record["request_id"] == "req1"
        assert record["tool"] == "text_to_speech"
        assert record["bytes"] == 20480

    def test_secrets_redacted(self, log_stream: io.StringIO) -> None:
        get_logger("eleven_mcp.test").warning(
            "Auth failed for xi-api-key: sk_0123456789abcdef0123", api_key="sk_live"
        )
        output = log_stream.getvalue()
        assert "sk_live" not in output
        assert "0123456789abcdef0123" not in output

    def test_exception_included(self, log_stream: io.StringIO) -> None:
        try:
            raise RuntimeError("kaput")
        except RuntimeError:
            get_logger("eleven_mcp.test").exception("Tool call crashed")
        assert "kaput" in last_record(log_stream)["exc"]

    def test_level_filtering_text(self) -> None:
        stream = io.StringIO()
        configure_logging("WARNING", "text", stream=stream)
        try:
            logger = get_logger("eleven_mcp.test.level")
            logger.info("hidden")
            logger.warning("shown", voice="Adam")
        finally:
            configure_logging("INFO")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "| WARNING  | eleven_mcp.test.level | shown | voice=Adam" in output

    def test_operation_scope(self, log_stream: io.StringIO) -> None:
        logger = get_logger("eleven_mcp.test")
        with call_context("transcribe", request_id="req2"):
            with operation_scope("transcription") as ctx:
                assert ctx.tool == "transcribe"
                logger.debug("Operation started")
            assert current_call_context().operation is None

        record = last_record(log_stream)
        assert record["operation"] == "transcription"
        assert record["request_id"] == "req2"
