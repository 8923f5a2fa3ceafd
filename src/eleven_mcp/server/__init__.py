"""
MCP server for eleven-mcp-server.

Exposes the API client as MCP tools plus two prompt guides, served over stdio.
"""

from eleven_mcp.server.app import create_server, main, serve
from eleven_mcp.server.prompts import PROMPTS, PromptGuide
from eleven_mcp.server.tools import TOOLS, ToolContext, ToolSpec, dispatch

__all__ = [
    "PROMPTS",
    "TOOLS",
    "PromptGuide",
    "ToolContext",
    "ToolSpec",
    "create_server",
    "dispatch",
    "main",
    "serve",
]
