from __future__ import annotations

import base64

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from image_reader.config import Settings
from image_reader.models import ImageContent, ResponseEnvelope
from image_reader.services.mcp_server import build_server, to_call_tool_result


def test_success_envelope_maps_to_image_content():
    envelope = ResponseEnvelope(content=[ImageContent(data="aGk=", mime_type="image/png")])
    result = to_call_tool_result(envelope)
    assert result.isError is False
    assert result.content[0].type == "image"
    assert result.content[0].mimeType == "image/png"
    assert result.content[0].data == "aGk="


def test_failure_envelope_maps_to_error_result():
    result = to_call_tool_result(ResponseEnvelope.failure("Error reading image: boom"))
    assert result.isError is True
    assert result.content[0].type == "text"
    assert result.content[0].text == "Error reading image: boom"


def test_server_identity():
    server = build_server(Settings(_env_file=None))
    assert server.name == "ImageReader"


@pytest.mark.asyncio
async def test_list_and_call_over_session(image_bytes, write_image):
    data = image_bytes((64, 48), "PNG")
    path = write_image("shot.png", data)
    server = build_server(Settings(_env_file=None))

    async with create_connected_server_and_client_session(server) as session:
        tools = await session.list_tools()
        assert [t.name for t in tools.tools] == ["read_image"]
        assert tools.tools[0].inputSchema["required"] == ["imagePath"]

        result = await session.call_tool("read_image", {"imagePath": str(path)})
        assert not result.isError
        assert result.content[0].mimeType == "image/png"
        assert base64.b64decode(result.content[0].data) == data

        failed = await session.call_tool("read_image", {"imagePath": str(path.with_name("gone.png"))})
        assert failed.isError
        assert failed.content[0].text.startswith("Error reading image:")
