"""ElevenLabs MCP 服务：把语音合成、音效、音乐、转写等能力作为 MCP 工具提供。

eleven-mcp-server: ElevenLabs audio capabilities as MCP tools.

The API client (``ElevenLabsClient``) can also be used on its own.
"""
from __future__ import annotations

__version__ = "1.0.0"

from eleven_mcp.client import ElevenLabsClient, ElevenLabsClientBuilder  # noqa: E402
from eleven_mcp.config import ServerConfig, load_config  # noqa: E402
from eleven_mcp.errors import ClientError, ElevenMcpError, ErrorKind  # noqa: E402

__all__ = [
    "ClientError",
    "ElevenLabsClient",
    "ElevenLabsClientBuilder",
    "ElevenMcpError",
    "ErrorKind",
    "ServerConfig",
    "__version__",
    "load_config",
]
