from __future__ import annotations

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from image_reader.models import CompactionConfig

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_prefix="IMAGE_READER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Server identity
    server_name: str = Field("ImageReader", description="Name announced to MCP clients.")
    server_version: str = Field("1.0.0", description="Version announced to MCP clients.")

    # Transport
    transport: Literal["stdio", "http"] = Field("stdio", description="Transport used by the CLI entry point.")
    http_host: str = Field("127.0.0.1", description="Bind address for the HTTP transport.")
    http_port: int = Field(8000, ge=1, le=65535, description="Port for the HTTP transport.")

    # Logging
    log_level: str = Field("INFO", description="Root log level, e.g. DEBUG or WARNING.")

    # Image compaction
    max_bytes: int = Field(1_048_576, gt=0, description="Maximum size of the returned image (bytes).")
    max_dimension: int = Field(1280, gt=0, description="Maximum width or height of the returned image (pixels).")
    min_dimension: int = Field(100, gt=0, description="Smallest side the PNG shrink loop may reach (pixels).")
    initial_quality: int = Field(80, ge=1, le=100, description="First JPEG quality tried (1-100).")
    quality_step: int = Field(10, ge=1, description="JPEG quality decrement per iteration.")
    quality_floor: int = Field(10, ge=1, le=100, description="Lowest JPEG quality tried.")
    scale_factor: float = Field(0.9, gt=0, lt=1, description="Dimension multiplier per PNG shrink iteration.")
    png_compress_level: int = Field(9, ge=0, le=9, description="zlib level used when encoding PNG (0-9).")
    preserve_png_format: bool = Field(
        False,
        description="If true, PNG inputs stay PNG and shrink by dimension instead of being converted to JPEG.",
    )

    def compaction_config(self) -> CompactionConfig:
        return CompactionConfig(
            max_bytes=self.max_bytes,
            max_dimension=self.max_dimension,
            min_dimension=self.min_dimension,
            initial_quality=self.initial_quality,
            quality_step=self.quality_step,
            quality_floor=self.quality_floor,
            scale_factor=self.scale_factor,
            png_compress_level=self.png_compress_level,
            preserve_png_format=self.preserve_png_format,
        )


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
