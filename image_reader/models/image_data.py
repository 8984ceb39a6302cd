from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ImageFormat(str, Enum):
    """Encoding detected from the image bytes themselves, not the file name."""

    JPEG = "JPEG"
    PNG = "PNG"
    OTHER = "OTHER"

    @classmethod
    def from_pillow(cls, name: str | None) -> "ImageFormat":
        if name in ("JPEG", "MPO"):
            # MPO is a JPEG container written by many cameras
            return cls.JPEG
        if name == "PNG":
            return cls.PNG
        return cls.OTHER


class ImageMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    format: ImageFormat
    mode: str = "RGB"  # Pillow mode, e.g. "RGBA" or "P"

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"

    def fits_within(self, max_dimension: int) -> bool:
        return self.width <= max_dimension and self.height <= max_dimension
