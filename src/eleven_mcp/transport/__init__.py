"""
Transport layer for eleven-mcp-server.

Handles HTTP communication with the ElevenLabs API.
"""

from eleven_mcp.transport.auth import (
    API_KEY_ENV,
    API_KEY_HEADER,
    get_auth_header,
    resolve_api_key,
)
from eleven_mcp.transport.http import HttpTransport

__all__ = [
    "API_KEY_ENV",
    "API_KEY_HEADER",
    "HttpTransport",
    "get_auth_header",
    "resolve_api_key",
]
