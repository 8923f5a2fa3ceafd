"""Tests for error module."""

import asyncio
import socket

import httpx

from eleven_mcp.errors import (
    RATE_LIMITED_MESSAGE,
    TIMEOUT_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    ClientError,
    ConfigError,
    DeadlineExceeded,
    ElevenMcpError,
    ErrorContext,
    ErrorKind,
    RemoteError,
    ToolInputError,
    TransportError,
    classify,
    extract_error_message,
    normalize,
    voice_not_found,
)


class TestErrorContext:
    """Tests for ErrorContext."""

    def test_empty_context(self) -> None:
        """Test empty context string representation."""
        assert str(ErrorContext()) == ""

    def test_context_with_source_and_hint(self) -> None:
        """Test context with source and hint."""
        ctx = ErrorContext(source="remote", hint="Check your API key")
        assert "[remote]" in str(ctx)
        assert "(hint: Check your API key)" in str(ctx)

    def test_context_with_field_path(self) -> None:
        ctx = ErrorContext(field_path="files[0]")
        assert "at 'files[0]'" in str(ctx)


class TestBaseErrors:
    """Tests for the raw error hierarchy."""

    def test_basic_error(self) -> None:
        error = ElevenMcpError("Something went wrong")
        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"

    def test_with_hint(self) -> None:
        error = ElevenMcpError("Failed").with_hint("Check the config")
        assert error.context.hint == "Check the config"

    def test_transport_error_details(self) -> None:
        error = TransportError("Connection failed", url="https://api.elevenlabs.io/v2/voices")
        assert error.context.details["url"] == "https://api.elevenlabs.io/v2/voices"
        assert "[transport]" in str(error)

    def test_deadline_is_transport_error(self) -> None:
        error = DeadlineExceeded(deadline=2.0, operation="speech")
        assert isinstance(error, TransportError)
        assert error.context.details["deadline_s"] == 2.0
        assert error.operation == "speech"

    def test_client_error_str_is_message(self) -> None:
        error = ClientError(ErrorKind.NOT_FOUND, "Voice missing")
        assert str(error) == "Voice missing"
        assert error.kind is ErrorKind.NOT_FOUND
        assert "not_found" in repr(error)

    def test_config_and_tool_input_errors(self) -> None:
        assert ConfigError("bad", variable="ELEVENLABS_TIMEOUT").variable == "ELEVENLABS_TIMEOUT"
        assert str(ToolInputError("Audio file not found: /x", field="audio_path")) == (
            "Audio file not found: /x"
        )


class TestRemoteErrorFromResponse:
    """Tests for RemoteError.from_response."""

    def test_detail_message(self) -> None:
        error = RemoteError.from_response(
            400,
            {"detail": {"status": "voice_not_found", "message": "A voice with that ID does not exist"}},
            {"Request-Id": "req_1"},
        )
        assert error.message == "A voice with that ID does not exist"
        assert error.status_code == 400
        assert error.request_id == "req_1"

    def test_retry_after(self) -> None:
        error = RemoteError.from_response(429, None, {"retry-after": "3"})
        assert error.retry_after == 3.0
        assert error.message == "HTTP 429"


class TestExtractErrorMessage:
    """Tests for error body parsing."""

    def test_detail_string(self) -> None:
        assert extract_error_message({"detail": "Unauthorized"}) == "Unauthorized"

    def test_validation_list(self) -> None:
        body = {"detail": [{"loc": ["body", "text"], "msg": "field required"}]}
        assert extract_error_message(body) == "body.text: field required"

    def test_error_envelope(self) -> None:
        assert extract_error_message({"error": {"message": "boom"}}) == "boom"
        assert extract_error_message({"message": "plain"}) == "plain"

    def test_empty(self) -> None:
        assert extract_error_message(None) is None
        assert extract_error_message({}) is None


class TestClassify:
    """Tests for error classification order."""

    def test_timeout_marker(self) -> None:
        assert classify(DeadlineExceeded()) is ErrorKind.TIMEOUT
        assert classify(asyncio.TimeoutError()) is ErrorKind.TIMEOUT
        assert classify(httpx.ReadTimeout("slow")) is ErrorKind.TIMEOUT

    def test_timeout_wins_over_status(self) -> None:
        """A timeout marker is a timeout whatever status it carries."""
        assert classify(DeadlineExceeded(status_code=401)) is ErrorKind.TIMEOUT

    def test_status_codes(self) -> None:
        assert classify(RemoteError("x", status_code=401)) is ErrorKind.UNAUTHORIZED
        assert classify(RemoteError("x", status_code=403)) is ErrorKind.UNAUTHORIZED
        assert classify(RemoteError("x", status_code=429)) is ErrorKind.RATE_LIMITED
        assert classify(RemoteError("x", status_code=422)) is ErrorKind.INVALID_REQUEST
        assert classify(RemoteError("x", status_code=500)) is ErrorKind.REMOTE_ERROR

    def test_status_wins_over_connection(self) -> None:
        error = TransportError("dropped", status_code=429)
        assert classify(error) is ErrorKind.RATE_LIMITED

    def test_connection_failures(self) -> None:
        assert classify(TransportError("Connection failed")) is ErrorKind.CONNECTION_FAILED
        assert classify(httpx.ConnectError("refused")) is ErrorKind.CONNECTION_FAILED
        assert classify(ConnectionRefusedError()) is ErrorKind.CONNECTION_FAILED
        assert classify(socket.gaierror("no host")) is ErrorKind.CONNECTION_FAILED

    def test_connection_code_attribute(self) -> None:
        error = RuntimeError("getaddrinfo failed")
        error.code = "ENOTFOUND"  # type: ignore[attr-defined]
        assert classify(error) is ErrorKind.CONNECTION_FAILED

    def test_unknown(self) -> None:
        assert classify(ValueError("weird")) is ErrorKind.REMOTE_ERROR


class TestNormalize:
    """Tests for normalize."""

    def test_client_error_passthrough(self) -> None:
        error = voice_not_found("Nobody")
        assert normalize(error) is error

    def test_fixed_messages(self) -> None:
        assert str(normalize(DeadlineExceeded())) == TIMEOUT_MESSAGE
        assert str(normalize(RemoteError("bad key", status_code=401))) == UNAUTHORIZED_MESSAGE
        assert str(normalize(RemoteError("quota", status_code=429))) == RATE_LIMITED_MESSAGE

    def test_validation_message_includes_remote_text(self) -> None:
        error = normalize(RemoteError("text: field required", status_code=422))
        assert error.kind is ErrorKind.INVALID_REQUEST
        assert error.message == "ElevenLabs validation error: text: field required"

    def test_connection_message(self) -> None:
        error = normalize(TransportError("Connection failed: [Errno 111]"))
        assert error.kind is ErrorKind.CONNECTION_FAILED
        assert error.message.startswith("Failed to connect to ElevenLabs API: ")

    def test_remote_message(self) -> None:
        error = normalize(RemoteError("Internal failure", status_code=500))
        assert error.kind is ErrorKind.REMOTE_ERROR
        assert error.message == "ElevenLabs API error: Internal failure"

    def test_http_status_error(self) -> None:
        request = httpx.Request("GET", "https://api.elevenlabs.io/v2/voices")
        response = httpx.Response(401, request=request, json={"detail": "nope"})
        error = httpx.HTTPStatusError("401", request=request, response=response)
        assert normalize(error).kind is ErrorKind.UNAUTHORIZED

    def test_voice_not_found_names_input(self) -> None:
        error = voice_not_found("Nonexistent")
        assert error.kind is ErrorKind.NOT_FOUND
        assert '"Nonexistent"' in error.message
        assert "list_voices" in error.message
