"""HTTP endpoints mirroring the MCP tool surface."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException

from image_reader.services.tools import TOOL_REGISTRY, call_tool

router = APIRouter(prefix="/tools", tags=["tools"])
logger = logging.getLogger(__name__)


@router.get("")
async def list_tools() -> list[dict[str, Any]]:
    return [
        {"name": name, "description": spec.description, "inputSchema": spec.input_schema()}
        for name, spec in TOOL_REGISTRY.items()
    ]


@router.post("/{tool_name}")
async def invoke_tool(tool_name: str, arguments: dict[str, Any] | None = Body(None)) -> dict[str, Any]:
    """Run a tool and return its envelope; failures are reported in-band with ``isError``."""
    if tool_name not in TOOL_REGISTRY:
        raise HTTPException(status_code=404, detail=f"Unknown tool: {tool_name}")
    envelope = await call_tool(tool_name, arguments)
    logger.debug("Tool %s finished, isError=%s", tool_name, envelope.failed)
    return envelope.to_wire()
