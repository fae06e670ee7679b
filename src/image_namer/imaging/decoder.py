"""Format-dispatching image decoder producing uniform pixel buffers."""

from io import BytesIO
from typing import Final

from PIL import Image, ImageOps

from image_namer.errors import DecodeError
from image_namer.logging import get_logger
from image_namer.models import ImageMediaType, PixelBuffer, is_supported_media_type

logger = get_logger(__name__)

# Uploads are untrusted. Default Pillow limit is ~178M pixels; 50M still covers
# large camera originals.
Image.MAX_IMAGE_PIXELS = 50_000_000

# Declared media type -> the only Pillow plugin allowed to open it.
PILLOW_PLUGINS: Final[dict[ImageMediaType, str]] = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}
# GIF and unknown types: some upstream sources mislabel or re-wrap JPEG frames.
_FALLBACK_PATH: Final = ("JPEG",)

_BACKGROUND: Final = (255, 255, 255)


def decode_image(data: bytes, media_type: str) -> PixelBuffer:
    """Decode JPEG/PNG/WebP bytes into a PixelBuffer.

    The declared media type picks the decoder; any other type (including GIF)
    gets a best-effort JPEG decode.

    Raises:
        DecodeError: The bytes are corrupt, empty, or not in the expected format.
    """
    formats = decode_formats(media_type)
    if not data:
        raise DecodeError(media_type, "empty buffer")

    try:
        with Image.open(BytesIO(data), formats=formats) as img:
            img.load()  # Force full pixel decode so truncation surfaces here
            oriented = ImageOps.exif_transpose(img)
            pixels = _to_pixel_buffer(oriented)
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        logger.warning(
            "image_decode_failed",
            media_type=media_type,
            decoder=formats[0],
            error=str(e),
        )
        raise DecodeError(media_type, str(e)) from e

    logger.debug(
        "image_decoded",
        media_type=media_type,
        decoder=formats[0],
        width=pixels.width,
        height=pixels.height,
        channels=pixels.channels,
    )
    return pixels


def decode_formats(media_type: str) -> tuple[str, ...]:
    """Pillow plugins allowed to open an upload with this declared type."""
    normalized = media_type.lower().strip()
    if is_supported_media_type(normalized):
        return (PILLOW_PLUGINS[normalized],)
    return _FALLBACK_PATH


def _to_pixel_buffer(img: Image.Image) -> PixelBuffer:
    """Normalise any Pillow mode to greyscale or RGB, flattening alpha onto white."""
    if img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        flattened = Image.new("RGB", rgba.size, _BACKGROUND)
        flattened.paste(rgba, mask=rgba.getchannel("A"))
        img = flattened
    elif img.mode != "L" and img.mode != "RGB":
        img = img.convert("RGB")

    channels = 1 if img.mode == "L" else 3
    return PixelBuffer(
        width=img.width,
        height=img.height,
        channels=channels,
        data=img.tobytes(),
    )


def to_image(pixels: PixelBuffer) -> Image.Image:
    """Wrap a PixelBuffer back into a Pillow image."""
    return Image.frombytes(pixels.mode, (pixels.width, pixels.height), pixels.data)
