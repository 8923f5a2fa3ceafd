"""错误归一化：将任意底层异常映射到固定的 ClientError 分类。

Error normalization.

Every failure from the gateway, the transport or the timeout race passes
through ``normalize`` exactly once before reaching a caller. Inspection
order is fixed:

1. timeout marker (a raced-out operation carries no status code)
2. authorization status (401/403)
3. rate/quota status (429)
4. validation status (422)
5. connection-level failure
6. anything else
"""

from __future__ import annotations

import asyncio
import socket
from typing import Any

import httpx

from eleven_mcp.errors.base import (
    ClientError,
    DeadlineExceeded,
    ElevenMcpError,
    ErrorKind,
    RemoteError,
    TransportError,
)

TIMEOUT_MESSAGE = "ElevenLabs API request timed out. Please try again."
UNAUTHORIZED_MESSAGE = (
    "Invalid ElevenLabs API key. Please check your ELEVENLABS_API_KEY environment variable."
)
RATE_LIMITED_MESSAGE = (
    "ElevenLabs API rate limit or quota exceeded. Check your plan limits at elevenlabs.io."
)

_UNAUTHORIZED_STATUSES = frozenset({401, 403})
_RATE_LIMITED_STATUS = 429
_VALIDATION_STATUS = 422

# Error codes reported by resolvers and sockets for unreachable hosts
_CONNECTION_CODES = frozenset(
    {"ENOTFOUND", "ECONNREFUSED", "ECONNRESET", "EAI_AGAIN", "EHOSTUNREACH", "ENETUNREACH"}
)

_TIMEOUT_TYPES: tuple[type[BaseException], ...] = (
    DeadlineExceeded,
    asyncio.TimeoutError,
    TimeoutError,
    httpx.TimeoutException,
)

_CONNECTION_TYPES: tuple[type[BaseException], ...] = (
    TransportError,
    httpx.TransportError,
    ConnectionError,
    socket.gaierror,
)


def status_of(error: BaseException) -> int | None:
    """Extract an HTTP status code from a raw error, if it carries one."""
    if isinstance(error, RemoteError):
        return error.status_code
    if isinstance(error, TransportError):
        return error.status_code
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


def message_of(error: BaseException) -> str:
    """Extract the most useful message from a raw error."""
    if isinstance(error, ElevenMcpError):
        return error.message
    if isinstance(error, httpx.HTTPStatusError):
        body = None
        try:
            body = error.response.json()
        except (ValueError, httpx.ResponseNotRead):
            pass
        if isinstance(body, dict):
            extracted = extract_error_message(body)
            if extracted:
                return extracted
    return str(error) or type(error).__name__


def is_timeout(error: BaseException) -> bool:
    """Check whether an error is a timeout marker."""
    return isinstance(error, _TIMEOUT_TYPES)


def is_connection_failure(error: BaseException) -> bool:
    """Check whether an error is a network-level failure."""
    if isinstance(error, _CONNECTION_TYPES):
        return True
    code = getattr(error, "code", None)
    return isinstance(code, str) and code.upper() in _CONNECTION_CODES


def classify(error: BaseException) -> ErrorKind:
    """Classify a raw error into an ErrorKind.

    Args:
        error: Any exception raised while performing a remote operation

    Returns:
        The matching ErrorKind
    """
    if isinstance(error, ClientError):
        return error.kind
    if is_timeout(error):
        return ErrorKind.TIMEOUT

    status = status_of(error)
    if status in _UNAUTHORIZED_STATUSES:
        return ErrorKind.UNAUTHORIZED
    if status == _RATE_LIMITED_STATUS:
        return ErrorKind.RATE_LIMITED
    if status == _VALIDATION_STATUS:
        return ErrorKind.INVALID_REQUEST

    if is_connection_failure(error):
        return ErrorKind.CONNECTION_FAILED
    return ErrorKind.REMOTE_ERROR


def normalize(error: BaseException) -> ClientError:
    """Map a raw failure into the ClientError taxonomy.

    An existing ClientError is returned unchanged.

    Args:
        error: Any exception raised while performing a remote operation

    Returns:
        ClientError with a user-actionable message
    """
    if isinstance(error, ClientError):
        return error

    kind = classify(error)
    if kind is ErrorKind.TIMEOUT:
        return ClientError(kind, TIMEOUT_MESSAGE)
    if kind is ErrorKind.UNAUTHORIZED:
        return ClientError(kind, UNAUTHORIZED_MESSAGE)
    if kind is ErrorKind.RATE_LIMITED:
        return ClientError(kind, RATE_LIMITED_MESSAGE)

    raw = message_of(error)
    if kind is ErrorKind.INVALID_REQUEST:
        return ClientError(
            kind, f"ElevenLabs validation error: {raw or 'Invalid request parameters.'}"
        )
    if kind is ErrorKind.CONNECTION_FAILED:
        return ClientError(kind, f"Failed to connect to ElevenLabs API: {raw}")
    return ClientError(kind, f"ElevenLabs API error: {raw}")


def voice_not_found(name_or_id: str) -> ClientError:
    """Build the NOT_FOUND error raised when voice resolution fails."""
    return ClientError(
        ErrorKind.NOT_FOUND,
        f'Voice "{name_or_id}" not found. Use list_voices to see available voices, '
        "or provide a voice ID directly.",
    )


def extract_error_message(body: dict[str, Any] | None) -> str | None:
    """Extract an error message from a response body.

    Supports the envelopes the API uses:
    - {"detail": {"status": "...", "message": "..."}}
    - {"detail": "..."}
    - {"detail": [{"loc": [...], "msg": "..."}]} (request validation)
    - {"error": {"message": "..."}} / {"message": "..."}

    Args:
        body: Response body (parsed JSON)

    Returns:
        Error message if found, None otherwise
    """
    if not body:
        return None

    if "detail" in body:
        detail = body["detail"]
        if isinstance(detail, str):
            return detail
        if isinstance(detail, dict):
            msg = detail.get("message") or detail.get("msg")
            if isinstance(msg, str):
                return msg
        if isinstance(detail, list) and detail:
            first = detail[0]
            if isinstance(first, dict):
                msg = first.get("msg") or first.get("message")
                loc = first.get("loc")
                if isinstance(msg, str) and isinstance(loc, list) and loc:
                    return f"{'.'.join(str(part) for part in loc)}: {msg}"
                if isinstance(msg, str):
                    return msg
            return str(first)

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            msg = error.get("message")
            if isinstance(msg, str):
                return msg
        elif isinstance(error, str):
            return error

    if "message" in body:
        msg = body["message"]
        if isinstance(msg, str):
            return msg

    return None
