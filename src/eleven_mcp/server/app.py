"""MCP 服务入口：注册工具与提示，通过 stdio 提供服务。

MCP server wiring.

Registers the tools and prompt guides on a low-level MCP server and serves
it over stdio. Logs go to stderr; stdout carries the protocol only.
"""

from __future__ import annotations

import asyncio
import contextlib
import signal
import sys
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from eleven_mcp import __version__
from eleven_mcp.client import ElevenLabsClient
from eleven_mcp.config import ServerConfig, load_config
from eleven_mcp.errors import ConfigError
from eleven_mcp.server.prompts import PROMPTS
from eleven_mcp.server.tools import TOOLS, ToolContext, dispatch
from eleven_mcp.telemetry import configure_logging, get_logger

SERVER_NAME = "eleven-mcp-server"

logger = get_logger(__name__)


def create_server(ctx: ToolContext) -> Server:
    """Build an MCP server whose tools run against ``ctx``."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema())
            for spec in TOOLS.values()
        ]

    # Arguments are validated by the tool input models so the error text stays ours.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        text = await dispatch(ctx, name, arguments)
        return [types.TextContent(type="text", text=text)]

    @server.list_prompts()
    async def list_prompts() -> list[types.Prompt]:
        return [
            types.Prompt(name=guide.name, description=guide.description)
            for guide in PROMPTS.values()
        ]

    @server.get_prompt()
    async def get_prompt(
        name: str, arguments: dict[str, str] | None
    ) -> types.GetPromptResult:
        guide = PROMPTS.get(name)
        if guide is None:
            raise ValueError(f"Unknown prompt: {name}")
        return types.GetPromptResult(
            description=guide.description,
            messages=[
                types.PromptMessage(
                    role="user", content=types.TextContent(type="text", text=guide.text)
                )
            ],
        )

    return server


async def serve(config: ServerConfig) -> None:
    """Serve over stdio until the client disconnects or SIGTERM arrives."""
    client = ElevenLabsClient.from_config(config)
    server = create_server(ToolContext(client=client, output_dir=config.output_dir))

    task = asyncio.current_task()
    if task is not None:
        with contextlib.suppress(NotImplementedError):
            asyncio.get_running_loop().add_signal_handler(signal.SIGTERM, task.cancel)

    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info(
                "ElevenLabs MCP server running on stdio",
                version=__version__,
                output_dir=str(config.output_dir),
                timeout_ms=config.timeout_ms,
            )
            await server.run(read_stream, write_stream, server.create_initialization_options())
    except asyncio.CancelledError:
        logger.info("Shutting down")
    finally:
        await client.close()


def main() -> None:
    """Console entry point."""
    try:
        config = load_config()
    except ConfigError as e:
        logger.error(f"Failed to start ElevenLabs MCP server: {e.message}", hint=e.context.hint)
        sys.exit(1)

    configure_logging(config.log_level, config.log_format)
    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Shutting down")
