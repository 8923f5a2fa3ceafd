"""
Telemetry module for eleven-mcp-server.

Provides structured, key-redacting logging on stderr.
"""

from eleven_mcp.telemetry.logger import (
    PACKAGE_LOGGER,
    CallContext,
    FieldLogger,
    KeyRedactor,
    StderrFormatter,
    call_context,
    configure_logging,
    current_call_context,
    get_logger,
    operation_scope,
    parse_level,
)

__all__ = [
    "PACKAGE_LOGGER",
    "CallContext",
    "FieldLogger",
    "KeyRedactor",
    "StderrFormatter",
    "call_context",
    "configure_logging",
    "current_call_context",
    "get_logger",
    "operation_scope",
    "parse_level",
]
