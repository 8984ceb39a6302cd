"""Configuration and result types for the compaction engine."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

MimeType = Literal["image/jpeg", "image/png"]


class CompactionConfig(BaseModel):
    """Size and dimension budget applied to every image.

    Built once per process from :class:`image_reader.config.Settings`; the
    model is frozen so requests cannot alter it.
    """

    model_config = ConfigDict(frozen=True)

    max_bytes: int = Field(1_048_576, gt=0)
    max_dimension: int = Field(1280, gt=0)
    min_dimension: int = Field(100, gt=0)
    initial_quality: int = Field(80, ge=1, le=100)
    quality_step: int = Field(10, ge=1)
    quality_floor: int = Field(10, ge=1, le=100)
    scale_factor: float = Field(0.9, gt=0, lt=1)
    png_compress_level: int = Field(9, ge=0, le=9)
    preserve_png_format: bool = False

    @model_validator(mode="after")
    def _check_ranges(self) -> "CompactionConfig":
        if self.quality_floor > self.initial_quality:
            raise ValueError("quality_floor must not exceed initial_quality")
        if self.min_dimension > self.max_dimension:
            raise ValueError("min_dimension must not exceed max_dimension")
        return self


class CompactionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: MimeType
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    met_threshold: bool
    iterations: int = Field(0, ge=0)  # encodes after the first one
    quality: int | None = None  # last JPEG quality, None for PNG and passthrough
    passthrough: bool = False  # original bytes returned untouched

    @property
    def size(self) -> int:
        return len(self.data)
