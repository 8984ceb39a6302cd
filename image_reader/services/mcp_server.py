"""Model Context Protocol server exposing the tool registry over stdio."""
from __future__ import annotations

import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from image_reader.config import Settings, get_settings
from image_reader.models import ImageContent, ResponseEnvelope
from image_reader.services.tools import TOOL_REGISTRY, call_tool

logger = logging.getLogger(__name__)


def to_call_tool_result(envelope: ResponseEnvelope) -> types.CallToolResult:
    content: list[types.ImageContent | types.TextContent] = []
    for block in envelope.content:
        if isinstance(block, ImageContent):
            content.append(types.ImageContent(type="image", data=block.data, mimeType=block.mime_type))
        else:
            content.append(types.TextContent(type="text", text=block.text))
    return types.CallToolResult(content=content, isError=envelope.failed)


def build_server(settings: Settings | None = None) -> Server:
    settings = settings or get_settings()
    server = Server(settings.server_name, version=settings.server_version)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=name, description=spec.description, inputSchema=spec.input_schema())
            for name, spec in TOOL_REGISTRY.items()
        ]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        if name not in TOOL_REGISTRY:
            logger.warning("Unknown tool requested: %s", name)
            return to_call_tool_result(ResponseEnvelope.failure(f"Unknown tool: {name}"))
        envelope = await call_tool(name, arguments)
        return to_call_tool_result(envelope)

    return server


async def run_stdio(settings: Settings | None = None) -> None:
    server = build_server(settings)
    logger.info("Starting MCP server %s over stdio", server.name)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
