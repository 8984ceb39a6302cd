from .compaction import CompactionConfig, CompactionResult, MimeType
from .envelope import ImageContent, ResponseEnvelope, TextContent
from .image_data import ImageFormat, ImageMetadata

__all__ = [
    "CompactionConfig",
    "CompactionResult",
    "MimeType",
    "ImageContent",
    "ResponseEnvelope",
    "TextContent",
    "ImageFormat",
    "ImageMetadata",
]
