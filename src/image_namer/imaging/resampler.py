"""Aspect-preserving downscale of decoded pixels."""

import math
from typing import Final

from PIL import Image

from image_namer.imaging.decoder import to_image
from image_namer.logging import get_logger
from image_namer.models import PixelBuffer

logger = get_logger(__name__)

# The vision model only needs to recognise the subject; 512px keeps the
# request small and within "detail: low" processing.
DEFAULT_MAX_DIMENSION: Final = 512


def target_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Dimensions after fitting the longest edge to ``max_dimension``.

    Never upscales. Each axis is rounded half-up, with a floor of 1px.
    """
    if max_dimension < 1:
        raise ValueError(f"max_dimension must be positive, got {max_dimension}")
    longest = max(width, height)
    if longest <= max_dimension:
        return width, height
    scale = max_dimension / longest
    return (
        max(1, math.floor(width * scale + 0.5)),
        max(1, math.floor(height * scale + 0.5)),
    )


def resample(pixels: PixelBuffer, max_dimension: int = DEFAULT_MAX_DIMENSION) -> PixelBuffer:
    """Downscale so the longest edge <= max_dimension. Returns the input if already small."""
    new_size = target_size(pixels.width, pixels.height, max_dimension)
    if new_size == (pixels.width, pixels.height):
        return pixels

    # Area averaging; exact pixel values do not matter to the vision model.
    resized = to_image(pixels).resize(new_size, Image.Resampling.BOX)
    logger.debug(
        "image_resampled",
        from_size=f"{pixels.width}x{pixels.height}",
        to_size=f"{new_size[0]}x{new_size[1]}",
    )
    return PixelBuffer(
        width=resized.width,
        height=resized.height,
        channels=pixels.channels,
        data=resized.tobytes(),
    )
