"""Response envelope returned by every tool call.

Field aliases follow the wire format (``mimeType``, ``isError``); dump with
``by_alias=True`` before sending.
"""
from __future__ import annotations

import base64
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .compaction import CompactionResult, MimeType


class ImageContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["image"] = "image"
    data: str  # base64
    mime_type: MimeType = Field(..., alias="mimeType")


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ResponseEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: list[Union[ImageContent, TextContent]]
    is_error: bool | None = Field(None, alias="isError")

    @classmethod
    def success(cls, result: CompactionResult) -> "ResponseEnvelope":
        encoded = base64.b64encode(result.data).decode("ascii")
        return cls(content=[ImageContent(data=encoded, mime_type=result.mime_type)])

    @classmethod
    def failure(cls, message: str) -> "ResponseEnvelope":
        return cls(content=[TextContent(text=message)], is_error=True)

    @property
    def failed(self) -> bool:
        return bool(self.is_error)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
