"""Adaptive image compaction.

Shrinks an arbitrary image until it fits a byte budget and a pixel-dimension
budget:

1. Images that are already JPEG/PNG and within both budgets are returned
   byte-for-byte.
2. Oversized images are fitted inside ``max_dimension`` x ``max_dimension`` in
   a single resize.
3. JPEG output is encoded at ``initial_quality`` and, while too large, quality
   is lowered by ``quality_step`` down to ``quality_floor``.
4. PNG output (only with ``preserve_png_format``) is encoded losslessly and,
   while too large, the pixel size is scaled by ``scale_factor`` until a side
   reaches ``min_dimension``.

Each loop iteration is a pure function from one :class:`CompactionState` to
the next. Missing the byte budget is not an error: the smallest buffer found
is returned with ``met_threshold=False``.
"""
from __future__ import annotations

import logging
import math

from PIL import Image
from pydantic import BaseModel, ConfigDict

from image_reader.models import CompactionConfig, CompactionResult, ImageFormat, ImageMetadata
from image_reader.services import codec

logger = logging.getLogger(__name__)


class CompactionState(BaseModel):
    """One encode attempt: the parameters used and the bytes produced."""

    model_config = ConfigDict(frozen=True)

    quality: int | None  # JPEG quality, None for PNG
    scale: float  # relative to the dimension-fitted base image
    data: bytes
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def compact(data: bytes, config: CompactionConfig | None = None) -> CompactionResult:
    """Return *data* re-encoded to fit *config*, or untouched if it already does.

    Raises
    ------
    DecodeError
        If *data* is not a decodable image.
    EncodeError
        If resizing or encoding fails.
    """

    config = config or CompactionConfig()
    image = codec.decode(data)
    meta = codec.metadata_of(image)

    if _can_pass_through(meta, len(data), config):
        logger.debug("Image %s %s (%d bytes) within budget, returning as is", meta.format.value, meta.resolution, len(data))
        return CompactionResult(
            data=data,
            mime_type=codec.mime_type_for(meta.format),
            width=meta.width,
            height=meta.height,
            met_threshold=True,
            passthrough=True,
        )

    output_format = choose_output_format(meta, config)
    base = image
    if not meta.fits_within(config.max_dimension):
        base = codec.resize(image, config.max_dimension, config.max_dimension)
        logger.debug("Resized %s -> %dx%d", meta.resolution, base.width, base.height)

    if output_format is ImageFormat.PNG:
        final, iterations = _shrink_dimensions(base, config)
    else:
        final, iterations = _reduce_quality(base, config)

    met = final.size <= config.max_bytes
    if met:
        logger.info(
            "Compacted %s %s (%d bytes) to %s %dx%d (%d bytes) after %d extra encodes",
            meta.format.value, meta.resolution, len(data),
            output_format.value, final.width, final.height, final.size, iterations,
        )
    else:
        logger.warning(
            "Could not fit %s %s under %d bytes; returning best effort of %d bytes",
            meta.format.value, meta.resolution, config.max_bytes, final.size,
        )

    return CompactionResult(
        data=final.data,
        mime_type=codec.mime_type_for(output_format),
        width=final.width,
        height=final.height,
        met_threshold=met,
        iterations=iterations,
        quality=final.quality,
    )


def choose_output_format(meta: ImageMetadata, config: CompactionConfig) -> ImageFormat:
    """PNG stays PNG only when configured to; everything else becomes JPEG."""

    if meta.format is ImageFormat.PNG and config.preserve_png_format:
        return ImageFormat.PNG
    return ImageFormat.JPEG


def next_quality_state(state: CompactionState, source: Image.Image, config: CompactionConfig) -> CompactionState:
    """Re-encode *source* one ``quality_step`` lower, never below the floor."""

    quality = max(state.quality - config.quality_step, config.quality_floor)
    return CompactionState(
        quality=quality,
        scale=state.scale,
        data=codec.encode(source, ImageFormat.JPEG, quality),
        width=state.width,
        height=state.height,
    )


def next_scale_state(state: CompactionState, source: Image.Image, config: CompactionConfig) -> CompactionState:
    """Scale *source* by one more ``scale_factor`` and re-encode as PNG.

    The scale is cumulative and always applied to the same source image, so
    resampling error does not compound between iterations.
    """

    scale = state.scale * config.scale_factor
    target = (max(1, round(source.width * scale)), max(1, round(source.height * scale)))
    resized = codec.resize(source, *target)
    return CompactionState(
        quality=None,
        scale=scale,
        data=codec.encode(resized, ImageFormat.PNG, config.png_compress_level),
        width=resized.width,
        height=resized.height,
    )


def quality_iteration_bound(config: CompactionConfig) -> int:
    """Upper bound on quality-loop iterations after the first encode."""

    return math.ceil((config.initial_quality - config.quality_floor) / config.quality_step)


def scale_iteration_bound(width: int, height: int, config: CompactionConfig) -> int:
    """Upper bound on dimension-loop iterations for a *width* x *height* base."""

    shortest = min(width, height)
    if shortest <= config.min_dimension:
        return 0
    return math.ceil(math.log(config.min_dimension / shortest) / math.log(config.scale_factor))


# ------------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------------

def _can_pass_through(meta: ImageMetadata, size: int, config: CompactionConfig) -> bool:
    return (
        meta.format is not ImageFormat.OTHER
        and meta.fits_within(config.max_dimension)
        and size <= config.max_bytes
    )


def _reduce_quality(base: Image.Image, config: CompactionConfig) -> tuple[CompactionState, int]:
    state = CompactionState(
        quality=config.initial_quality,
        scale=1.0,
        data=codec.encode(base, ImageFormat.JPEG, config.initial_quality),
        width=base.width,
        height=base.height,
    )
    smallest = state
    iterations = 0
    limit = quality_iteration_bound(config)
    while state.size > config.max_bytes and state.quality > config.quality_floor and iterations < limit:
        state = next_quality_state(state, base, config)
        iterations += 1
        logger.debug("Quality %d -> %d bytes", state.quality, state.size)
        if state.size <= smallest.size:
            smallest = state
    return (state if state.size <= config.max_bytes else smallest), iterations


def _shrink_dimensions(base: Image.Image, config: CompactionConfig) -> tuple[CompactionState, int]:
    state = CompactionState(
        quality=None,
        scale=1.0,
        data=codec.encode(base, ImageFormat.PNG, config.png_compress_level),
        width=base.width,
        height=base.height,
    )
    smallest = state
    iterations = 0
    limit = scale_iteration_bound(base.width, base.height, config)
    while (
        state.size > config.max_bytes
        and min(state.width, state.height) > config.min_dimension
        and iterations < limit
    ):
        state = next_scale_state(state, base, config)
        iterations += 1
        logger.debug("Scale %.3f (%dx%d) -> %d bytes", state.scale, state.width, state.height, state.size)
        if state.size <= smallest.size:
            smallest = state
    return (state if state.size <= config.max_bytes else smallest), iterations
