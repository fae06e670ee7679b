"""JPEG encoding strategies that keep the naming thumbnail within a byte budget."""

from dataclasses import dataclass
from io import BytesIO
from typing import ClassVar, Final, Protocol

from image_namer.errors import EncodeBudgetExceeded
from image_namer.imaging.decoder import to_image
from image_namer.imaging.resampler import DEFAULT_MAX_DIMENSION, resample
from image_namer.logging import get_logger
from image_namer.models import CompressionMode, EncodedCandidate, PixelBuffer

logger = get_logger(__name__)

THUMBNAIL_QUALITY: Final = 40

DEFAULT_SIZE_CEILING: Final = 4 * 1024 * 1024  # 4 MiB
SEARCH_START_QUALITY: Final = 60
SEARCH_MIN_QUALITY: Final = 10
SEARCH_QUALITY_STEP: Final = 10


def encode_jpeg(pixels: PixelBuffer, quality: int) -> bytes:
    """Encode pixels as baseline JPEG. Same pixels and quality give identical bytes."""
    if not 1 <= quality <= 100:
        raise ValueError(f"JPEG quality must be 1-100, got {quality}")
    buf = BytesIO()
    to_image(pixels).save(buf, format="JPEG", quality=quality, optimize=True)
    return buf.getvalue()


class CompressionStrategy(Protocol):
    """Turns decoded pixels into a JPEG candidate for the naming request."""

    mode: ClassVar[CompressionMode]

    def compress(self, pixels: PixelBuffer) -> EncodedCandidate: ...


@dataclass(frozen=True)
class ThumbnailStrategy:
    """Downscale and encode once at a fixed low quality.

    Favours speed and a predictable (usually tens of KB) output over exact
    budget adherence.
    """

    max_dimension: int = DEFAULT_MAX_DIMENSION
    quality: int = THUMBNAIL_QUALITY
    mode: ClassVar[CompressionMode] = CompressionMode.THUMBNAIL

    def compress(self, pixels: PixelBuffer) -> EncodedCandidate:
        small = resample(pixels, self.max_dimension)
        data = encode_jpeg(small, self.quality)
        logger.debug(
            "jpeg_encoded",
            strategy=self.mode.value,
            width=small.width,
            height=small.height,
            quality=self.quality,
            size_kb=round(len(data) / 1024, 1),
        )
        return EncodedCandidate(data=data, quality=self.quality)


@dataclass(frozen=True)
class QualitySearchStrategy:
    """Re-encode at descending quality until the output fits ``ceiling`` bytes.

    Qualities tried: ``start_quality``, ``start_quality - step``, ... down to
    ``min_quality``. The first encoding that fits wins; if the lowest quality
    is still too large, :class:`EncodeBudgetExceeded` is raised.
    ``max_dimension=None`` skips resampling.
    """

    ceiling: int = DEFAULT_SIZE_CEILING
    max_dimension: int | None = DEFAULT_MAX_DIMENSION
    start_quality: int = SEARCH_START_QUALITY
    min_quality: int = SEARCH_MIN_QUALITY
    step: int = SEARCH_QUALITY_STEP
    mode: ClassVar[CompressionMode] = CompressionMode.QUALITY_SEARCH

    def __post_init__(self) -> None:
        if self.ceiling < 1:
            raise ValueError(f"ceiling must be positive, got {self.ceiling}")
        if self.step < 1:
            raise ValueError(f"step must be positive, got {self.step}")
        if not 1 <= self.min_quality <= self.start_quality <= 100:
            raise ValueError(
                f"need 1 <= min_quality <= start_quality <= 100, "
                f"got {self.min_quality}..{self.start_quality}"
            )

    def qualities(self) -> list[int]:
        """Quality steps in the order they are tried."""
        steps = list(range(self.start_quality, self.min_quality - 1, -self.step))
        if steps[-1] != self.min_quality:
            steps.append(self.min_quality)
        return steps

    def compress(self, pixels: PixelBuffer) -> EncodedCandidate:
        if self.max_dimension is not None:
            pixels = resample(pixels, self.max_dimension)

        sizes: list[int] = []
        for quality in self.qualities():
            data = encode_jpeg(pixels, quality)
            if len(data) <= self.ceiling:
                logger.debug(
                    "jpeg_encoded",
                    strategy=self.mode.value,
                    width=pixels.width,
                    height=pixels.height,
                    quality=quality,
                    size_kb=round(len(data) / 1024, 1),
                )
                return EncodedCandidate(data=data, quality=quality)
            sizes.append(len(data))
            logger.debug(
                "quality_step_over_budget",
                quality=quality,
                size=len(data),
                ceiling=self.ceiling,
            )

        smallest = min(sizes)
        logger.warning(
            "encode_budget_exceeded",
            ceiling=self.ceiling,
            smallest=smallest,
            min_quality=self.min_quality,
        )
        raise EncodeBudgetExceeded(self.ceiling, smallest, self.min_quality)


def get_strategy(
    mode: CompressionMode | str,
    *,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    thumbnail_quality: int = THUMBNAIL_QUALITY,
    ceiling: int = DEFAULT_SIZE_CEILING,
) -> CompressionStrategy | None:
    """Build the strategy for a configured mode. ``none`` means send originals."""
    mode = CompressionMode(mode)
    if mode is CompressionMode.THUMBNAIL:
        return ThumbnailStrategy(max_dimension=max_dimension, quality=thumbnail_quality)
    if mode is CompressionMode.QUALITY_SEARCH:
        return QualitySearchStrategy(ceiling=ceiling, max_dimension=max_dimension)
    return None
