"""Upload → thumbnail → vision API → filename, with fallback on any failure."""

import asyncio
import uuid
from typing import Final

import httpx
import structlog

from image_namer.errors import DecodeError, EncodeBudgetExceeded
from image_namer.imaging.decoder import decode_image
from image_namer.imaging.encoder import CompressionStrategy, ThumbnailStrategy
from image_namer.logging import get_logger
from image_namer.models import EncodedCandidate, ImageBuffer, NamingConfig
from image_namer.naming.retry import request_filename_with_retry
from image_namer.transport import build_data_uri

logger = get_logger(__name__)

DEFAULT_STRATEGY: Final = ThumbnailStrategy()

# Media type used when the original bytes are sent and nothing was declared
_UNDECLARED_MEDIA_TYPE: Final = "image/jpeg"


def prepare_image(
    image: ImageBuffer,
    strategy: CompressionStrategy | None = DEFAULT_STRATEGY,
    *,
    max_image_size: int | None = None,
) -> EncodedCandidate | None:
    """Reduce an upload to the image that will be sent for naming.

    With a strategy, the upload is decoded and re-encoded. If that fails the
    original bytes are used instead, unless they exceed ``max_image_size``.
    With ``strategy=None`` the original is always used, subject to the same
    size limit.

    Returns:
        The candidate to send, or None when no acceptable image can be produced.
    """
    original = EncodedCandidate(
        data=image.data,
        media_type=image.media_type or _UNDECLARED_MEDIA_TYPE,
    )
    too_large = max_image_size is not None and image.size > max_image_size

    if strategy is None:
        if too_large:
            logger.warning("original_too_large", size=image.size, max_image_size=max_image_size)
            return None
        return original

    try:
        pixels = decode_image(image.data, image.media_type)
        candidate = strategy.compress(pixels)
    except (DecodeError, EncodeBudgetExceeded) as e:
        if too_large:
            logger.warning(
                "no_ai_summary",
                reason=type(e).__name__,
                size=image.size,
                max_image_size=max_image_size,
            )
            return None
        logger.info("compression_failed_using_original", reason=type(e).__name__)
        return original

    logger.info(
        "image_compressed",
        strategy=strategy.mode.value,
        original_kb=round(image.size / 1024),
        compressed_kb=round(candidate.size / 1024, 1),
        quality=candidate.quality,
    )
    return candidate


async def generate_ai_filename(
    image_bytes: bytes,
    media_type: str,
    config: NamingConfig,
    *,
    strategy: CompressionStrategy | None = DEFAULT_STRATEGY,
    client: httpx.AsyncClient | None = None,
) -> str | None:
    """Produce an AI filename (without extension) for an uploaded image.

    Never raises for naming failures: None tells the caller to apply its
    ``config.fallback_name_type`` naming scheme instead.

    Args:
        image_bytes: The upload as received.
        media_type: Declared MIME type of the upload.
        config: Naming settings for this invocation.
        strategy: Compression strategy; None sends the original bytes.
        client: Optional shared HTTP client for the naming request.
    """
    if not config.is_configured:
        logger.debug("ai_naming_not_configured", enabled=config.enabled)
        return None

    with structlog.contextvars.bound_contextvars(naming_id=uuid.uuid4().hex[:8]):
        logger.info(
            "ai_naming_started",
            media_type=media_type,
            size=len(image_bytes),
            api_url=config.api_url,
        )
        image = ImageBuffer(data=image_bytes, media_type=media_type)
        try:
            candidate = await asyncio.to_thread(
                prepare_image, image, strategy, max_image_size=config.max_image_size
            )
        except Exception:
            logger.error("image_preparation_error", exc_info=True)
            return None
        if candidate is None:
            return None

        data_uri = build_data_uri(candidate.data, candidate.media_type)
        filename = await request_filename_with_retry(data_uri, config, client=client)
        if filename is None:
            logger.info("ai_naming_fallback", fallback_name_type=config.fallback_name_type.value)
        return filename
