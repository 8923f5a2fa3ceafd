"""错误基类：分层错误体系与结构化错误上下文。

Base error classes for eleven-mcp-server.

Two layers of errors exist:
- Raw errors raised by the transport and gateway (TransportError,
  DeadlineExceeded, RemoteError). They carry whatever the wire gave us.
- ClientError, the only error shape the API client surfaces. Every raw
  error is mapped into one of the fixed ErrorKind values by
  ``eleven_mcp.errors.classification.normalize``.

ConfigError and ToolInputError cover startup configuration and tool
argument problems, which never reach the remote service.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Fixed set of error kinds surfaced to callers."""

    TIMEOUT = "timeout"
    """The remote call did not complete within its scaled deadline."""

    UNAUTHORIZED = "unauthorized"
    """Bad or missing credential."""

    RATE_LIMITED = "rate_limited"
    """Quota or rate limit hit."""

    INVALID_REQUEST = "invalid_request"
    """Remote-side validation rejected the parameters."""

    CONNECTION_FAILED = "connection_failed"
    """Network or DNS failure reaching the remote endpoint."""

    NOT_FOUND = "not_found"
    """Voice resolution failed."""

    REMOTE_ERROR = "remote_error"
    """Unclassified remote failure."""


@dataclass
class ErrorContext:
    """Structured error context for diagnostics."""

    field_path: str | None = None
    """Path to the problematic argument (e.g., 'files[0]')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'transport', 'remote', 'config')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.field_path:
            parts.append(f"at '{self.field_path}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class ElevenMcpError(Exception):
    """Base class for all eleven-mcp-server errors.

    Attributes:
        message: Human-readable error message
        context: Optional structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> ElevenMcpError:
        """Add a hint to this error."""
        self.context.hint = hint
        return self


class TransportError(ElevenMcpError):
    """Error while talking to the remote endpoint over HTTP.

    Raised when:
    - DNS resolution or connection fails
    - The connection drops mid-stream
    - TLS or proxy errors occur
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport")
        if url:
            ctx.details["url"] = url
        if status_code:
            ctx.details["status_code"] = status_code
        super().__init__(message, ctx)
        self.url = url
        self.status_code = status_code
        self.__cause__ = cause


class DeadlineExceeded(TransportError):
    """Timeout marker.

    Raised by the timeout race when an operation outlives its deadline, and
    by the transport when httpx itself gives up waiting. A deadline error is
    always classified as a timeout, whatever status code it may carry.
    """

    def __init__(
        self,
        message: str = "Request timeout",
        *,
        deadline: float | None = None,
        operation: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        ctx = ErrorContext(source="deadline")
        if deadline is not None:
            ctx.details["deadline_s"] = deadline
        if operation:
            ctx.details["operation"] = operation
        super().__init__(
            message, ctx, url=url, status_code=status_code, cause=cause
        )
        self.deadline = deadline
        self.operation = operation


class RemoteError(ElevenMcpError):
    """Error response returned by the remote API.

    Attributes:
        status_code: HTTP status code
        raw_error: Parsed error body, if any
        request_id: Request ID echoed by the API, if any
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        raw_error: dict[str, Any] | None = None,
        request_id: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        ctx = ErrorContext(source="remote")
        ctx.details["status_code"] = status_code
        if request_id:
            ctx.details["request_id"] = request_id
        super().__init__(message, ctx)
        self.status_code = status_code
        self.raw_error = raw_error or {}
        self.request_id = request_id
        self.retry_after = retry_after

    @classmethod
    def from_response(
        cls,
        status_code: int,
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> RemoteError:
        """Create a RemoteError from an HTTP error response.

        Args:
            status_code: HTTP status code
            body: Response body (parsed JSON)
            headers: Response headers

        Returns:
            RemoteError carrying the remote message
        """
        from eleven_mcp.errors.classification import extract_error_message

        message = extract_error_message(body) or f"HTTP {status_code}"

        retry_after = None
        request_id = None
        if headers:
            lowered = {k.lower(): v for k, v in headers.items()}
            retry_after_str = lowered.get("retry-after")
            if retry_after_str:
                with contextlib.suppress(ValueError):
                    retry_after = float(retry_after_str)
            request_id = lowered.get("request-id") or lowered.get("x-request-id")

        return cls(
            message=message,
            status_code=status_code,
            raw_error=body,
            request_id=request_id,
            retry_after=retry_after,
        )


class ClientError(ElevenMcpError):
    """The only error shape surfaced by the API client.

    ``str(error)`` is the user-facing message, so dispatch code can show it
    as-is.

    Attributes:
        kind: Error classification
        message: Human-readable, user-actionable message
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message, ErrorContext(details={"kind": kind.value}))
        self.kind = kind

    def __repr__(self) -> str:
        return f"ClientError(kind={self.kind.value!r}, message={self.message!r})"


class ConfigError(ElevenMcpError):
    """Invalid or missing startup configuration."""

    def __init__(self, message: str, *, variable: str | None = None) -> None:
        ctx = ErrorContext()
        if variable:
            ctx.details["variable"] = variable
        super().__init__(message, ctx)
        self.variable = variable


class ToolInputError(ElevenMcpError):
    """Tool arguments failed validation or pre-flight checks."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        ctx = ErrorContext()
        if field:
            ctx.details["field"] = field
        super().__init__(message, ctx)
        self.field = field
