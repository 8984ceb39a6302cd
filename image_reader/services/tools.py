"""Tool definitions and executors shared by the MCP and HTTP transports."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from image_reader.config import get_settings
from image_reader.errors import ImageReaderError
from image_reader.models import CompactionConfig, ResponseEnvelope
from image_reader.services.compaction import compact
from image_reader.services.files import read_file_bytes, resolve_path

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tool: read_image
# ---------------------------------------------------------------------------

READ_IMAGE_DESCRIPTION = (
    "Reads an image file from the specified path and returns it as Base64-encoded image data, "
    "downsized and re-encoded when needed so it stays within the size limits."
)


class ReadImageInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_path: str = Field(
        ...,
        alias="imagePath",
        description="The absolute or relative path to the image file (e.g., '/path/to/image.jpg')",
    )


async def read_image(image_path: Any, *, config: CompactionConfig | None = None) -> ResponseEnvelope:
    """Resolve, load and compact an image, always returning an envelope.

    Relative paths are resolved against the home directory. File reads and
    Pillow work run in a worker thread. Any failure becomes a failure envelope.
    """

    try:
        config = config or get_settings().compaction_config()
        path = resolve_path(image_path)
        raw = await asyncio.to_thread(read_file_bytes, path)
        result = await asyncio.to_thread(compact, raw, config)
    except (ImageReaderError, OSError) as exc:
        logger.warning("read_image failed for %r: %s", image_path, exc)
        return ResponseEnvelope.failure(f"Error reading image: {exc}")
    except ValidationError as exc:
        logger.error("Invalid compaction settings: %s", exc)
        return ResponseEnvelope.failure(f"Error reading image: invalid image settings: {exc}")
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected error in read_image for %r", image_path)
        return ResponseEnvelope.failure(f"Error reading image: {exc}")

    logger.info("read_image %s -> %s, %d bytes", path, result.mime_type, result.size)
    return ResponseEnvelope.success(result)


async def read_image_exec(inp: ReadImageInput) -> ResponseEnvelope:
    return await read_image(inp.image_path)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ToolSpec(NamedTuple):
    description: str
    input_model: type[BaseModel]
    executor: Callable[[Any], Awaitable[ResponseEnvelope]]

    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema(by_alias=True)


TOOL_REGISTRY: dict[str, ToolSpec] = {
    "read_image": ToolSpec(READ_IMAGE_DESCRIPTION, ReadImageInput, read_image_exec),
}


async def call_tool(name: str, arguments: dict[str, Any] | None) -> ResponseEnvelope:
    """Validate *arguments* for tool *name* and run it.

    Raises ``KeyError`` for unknown tools; invalid arguments produce a failure
    envelope.
    """

    spec = TOOL_REGISTRY[name]
    try:
        inp = spec.input_model.model_validate(arguments or {})
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}" for err in exc.errors()
        )
        logger.warning("Invalid arguments for %s: %s", name, problems)
        return ResponseEnvelope.failure(f"Invalid arguments for {name}: {problems}")
    return await spec.executor(inp)
