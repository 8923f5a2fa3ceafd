"""错误体系：固定分类的客户端错误与底层传输错误。

Error hierarchy for eleven-mcp-server.

Raw transport/remote errors are normalized into ClientError, whose kind is
one of a fixed set of ErrorKind values.
"""

from eleven_mcp.errors.base import (
    ClientError,
    ConfigError,
    DeadlineExceeded,
    ElevenMcpError,
    ErrorContext,
    ErrorKind,
    RemoteError,
    ToolInputError,
    TransportError,
)
from eleven_mcp.errors.classification import (
    RATE_LIMITED_MESSAGE,
    TIMEOUT_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    classify,
    extract_error_message,
    is_connection_failure,
    is_timeout,
    normalize,
    status_of,
    voice_not_found,
)

__all__ = [
    # Base errors
    "ClientError",
    "ConfigError",
    "DeadlineExceeded",
    "ElevenMcpError",
    "ErrorContext",
    "ErrorKind",
    "RemoteError",
    "ToolInputError",
    "TransportError",
    # Classification
    "RATE_LIMITED_MESSAGE",
    "TIMEOUT_MESSAGE",
    "UNAUTHORIZED_MESSAGE",
    "classify",
    "extract_error_message",
    "is_connection_failure",
    "is_timeout",
    "normalize",
    "status_of",
    "voice_not_found",
]
