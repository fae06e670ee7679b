"""Decode, resample and re-encode uploads into small naming thumbnails."""

from image_namer.imaging.decoder import decode_image
from image_namer.imaging.encoder import (
    CompressionStrategy,
    QualitySearchStrategy,
    ThumbnailStrategy,
    encode_jpeg,
    get_strategy,
)
from image_namer.imaging.resampler import resample, target_size

__all__ = [
    "CompressionStrategy",
    "QualitySearchStrategy",
    "ThumbnailStrategy",
    "decode_image",
    "encode_jpeg",
    "get_strategy",
    "resample",
    "target_size",
]
