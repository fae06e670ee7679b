"""Command-line entry point for naming a local image file."""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Final

from image_namer.config import Settings
from image_namer.logging import configure_logging, get_logger
from image_namer.models import ImageBuffer
from image_namer.pipeline import generate_ai_filename, prepare_image

logger = get_logger(__name__)

_EXTENSION_MEDIA_TYPES: Final[dict[str, str]] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def guess_media_type(path: Path) -> str:
    """Media type from the file extension; empty string if unknown."""
    suffix = path.suffix.lower()
    if suffix in _EXTENSION_MEDIA_TYPES:
        return _EXTENSION_MEDIA_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or ""


def run_prepare_only(settings: Settings, path: Path, media_type: str) -> int:
    """Write the thumbnail that would be sent, without calling the API."""
    image = ImageBuffer(data=path.read_bytes(), media_type=media_type)
    candidate = prepare_image(
        image,
        settings.compression_strategy(),
        max_image_size=settings.max_image_size,
    )
    if candidate is None:
        print("No image could be prepared for naming", file=sys.stderr)
        return 1
    out = path.with_name(f"{path.stem}.naming-thumb.jpg")
    out.write_bytes(candidate.data)
    print(f"{out} ({candidate.size} bytes, quality={candidate.quality})")
    return 0


async def run_naming(settings: Settings, path: Path, media_type: str) -> int:
    """Name one file and print the result, or the fallback scheme on failure."""
    config = settings.naming_config()
    filename = await generate_ai_filename(
        path.read_bytes(),
        media_type,
        config,
        strategy=settings.compression_strategy(),
    )
    if filename is None:
        print(f"fallback:{config.fallback_name_type.value}")
        return 1
    print(filename)
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Generate a descriptive filename for an image using a vision model"
    )
    parser.add_argument("path", type=Path, help="Image file to name")
    parser.add_argument(
        "--media-type",
        default=None,
        help="Declared MIME type (default: guessed from the file extension)",
    )
    parser.add_argument(
        "--prepare-only",
        action="store_true",
        help="Write the compressed naming thumbnail next to the file and exit",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines instead of console output",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging for troubleshooting",
    )
    args = parser.parse_args()

    configure_logging(
        json_output=args.json_logs,
        level=logging.DEBUG if args.debug else logging.INFO,
    )

    try:
        settings = Settings()
    except Exception as e:
        logger.error("failed_to_load_settings", error=str(e))
        print(f"Error: Failed to load settings. {e}")
        print("Required for naming: AI_NAMING_ENABLED=true, AI_NAMING_API_URL, AI_NAMING_API_KEY")
        sys.exit(2)

    path: Path = args.path
    if not path.is_file():
        print(f"Error: {path} is not a file")
        sys.exit(2)
    media_type = args.media_type or guess_media_type(path)

    if args.prepare_only:
        sys.exit(run_prepare_only(settings, path, media_type))
    sys.exit(asyncio.run(run_naming(settings, path, media_type)))


if __name__ == "__main__":
    main()
