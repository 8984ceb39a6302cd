"""Pillow-backed image codec helpers.

Small, pure functions over bytes and ``PIL.Image.Image`` objects: decode and
probe raw bytes, fit an image inside a bounding box, and encode it as JPEG
(quality 1-100) or PNG (zlib level 0-9). Nothing here touches the filesystem.
"""
from __future__ import annotations

import io
import logging

from PIL import Image

from image_reader.errors import DecodeError, EncodeError
from image_reader.models import ImageFormat, ImageMetadata, MimeType

logger = logging.getLogger(__name__)

_MIME_TYPES: dict[ImageFormat, MimeType] = {
    ImageFormat.JPEG: "image/jpeg",
    ImageFormat.PNG: "image/png",
}

# Modes Pillow can write without conversion
_JPEG_MODES = {"L", "RGB", "CMYK"}
_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}

_JPEG_BACKGROUND = (255, 255, 255)


# ------------------------------------------------------------------
# Decoding
# ------------------------------------------------------------------

def decode(data: bytes) -> Image.Image:
    """Decode *data* into a fully loaded image.

    Raises
    ------
    DecodeError
        If the bytes are empty, not a recognised image, or truncated.
    """

    if not data:
        raise DecodeError("file is empty")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Image.DecompressionBombError as exc:
        raise DecodeError(str(exc)) from exc
    except (OSError, SyntaxError, ValueError) as exc:
        # UnidentifiedImageError and truncation errors are OSError subclasses
        raise DecodeError(str(exc)) from exc
    return image


def metadata_of(image: Image.Image) -> ImageMetadata:
    width, height = image.size
    return ImageMetadata(
        width=width,
        height=height,
        format=ImageFormat.from_pillow(image.format),
        mode=image.mode,
    )


def probe(data: bytes) -> ImageMetadata:
    """Return dimensions and the actual encoding of *data*."""

    return metadata_of(decode(data))


# ------------------------------------------------------------------
# Transformations
# ------------------------------------------------------------------

def fit_inside(width: int, height: int, box_width: int, box_height: int, *, allow_enlarge: bool = False) -> tuple[int, int]:
    """Return the size of a *width* x *height* image scaled to fit the box.

    Aspect ratio is preserved and neither side drops below one pixel.
    """

    ratio = min(box_width / width, box_height / height)
    if ratio >= 1 and not allow_enlarge:
        return width, height
    return max(1, round(width * ratio)), max(1, round(height * ratio))


def resize(
    image: Image.Image,
    target_width: int,
    target_height: int,
    *,
    allow_enlarge: bool = False,
) -> Image.Image:
    """Return a new image fitting inside ``target_width`` x ``target_height``.

    The source image is left untouched. Without *allow_enlarge* an image that
    already fits is returned as a copy at its original size.
    """

    if target_width < 1 or target_height < 1:
        raise EncodeError(f"invalid target size {target_width}x{target_height}")
    new_size = fit_inside(*image.size, target_width, target_height, allow_enlarge=allow_enlarge)
    try:
        if new_size == image.size:
            return image.copy()
        return image.resize(new_size, Image.Resampling.LANCZOS)
    except (OSError, ValueError) as exc:
        raise EncodeError(str(exc)) from exc


# ------------------------------------------------------------------
# Encoding
# ------------------------------------------------------------------

def encode(image: Image.Image, fmt: ImageFormat, quality_or_level: int) -> bytes:
    """Encode *image* as *fmt*.

    Parameters
    ----------
    image : PIL.Image.Image
        Decoded source image.
    fmt : ImageFormat
        ``JPEG`` or ``PNG``.
    quality_or_level : int
        JPEG quality (1-100, higher is larger) or PNG zlib level (0-9,
        higher is smaller but slower).
    """

    buffer = io.BytesIO()
    try:
        if fmt is ImageFormat.JPEG:
            if not 1 <= quality_or_level <= 100:
                raise EncodeError(f"JPEG quality out of range: {quality_or_level}")
            _prepare_for_jpeg(image).save(buffer, format="JPEG", quality=quality_or_level, optimize=True)
        elif fmt is ImageFormat.PNG:
            if not 0 <= quality_or_level <= 9:
                raise EncodeError(f"PNG compression level out of range: {quality_or_level}")
            _prepare_for_png(image).save(buffer, format="PNG", compress_level=quality_or_level)
        else:
            raise EncodeError(f"unsupported output format {fmt.value}")
    except (OSError, ValueError) as exc:
        raise EncodeError(str(exc)) from exc
    data = buffer.getvalue()
    logger.debug("Encoded %s %dx%d at %d -> %d bytes", fmt.value, image.width, image.height, quality_or_level, len(data))
    return data


def mime_type_for(fmt: ImageFormat) -> MimeType:
    try:
        return _MIME_TYPES[fmt]
    except KeyError:
        raise ValueError(f"No MIME type for output format {fmt.value}") from None


# ------------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------------

def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (image.mode == "P" and "transparency" in image.info)


def _prepare_for_jpeg(image: Image.Image) -> Image.Image:
    """Flatten transparency onto white and convert to a JPEG-writable mode."""

    if _has_alpha(image):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, _JPEG_BACKGROUND)
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode not in _JPEG_MODES:
        return image.convert("RGB")
    return image


def _prepare_for_png(image: Image.Image) -> Image.Image:
    if image.mode in _PNG_MODES:
        return image
    return image.convert("RGBA" if _has_alpha(image) else "RGB")
