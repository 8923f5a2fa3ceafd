"""
Client module for eleven-mcp-server.

Provides the ElevenLabsClient, the single entry point for every capability.
"""

from eleven_mcp.client.builder import ElevenLabsClientBuilder
from eleven_mcp.client.core import ElevenLabsClient

__all__ = [
    "ElevenLabsClient",
    "ElevenLabsClientBuilder",
]
