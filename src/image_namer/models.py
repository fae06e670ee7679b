"""Data models for the image naming pipeline."""

from enum import StrEnum
from typing import Final, Literal, Self, TypeAlias, TypeGuard, get_args

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

# Media types with a dedicated decode path. Anything else is tried as JPEG.
ImageMediaType: TypeAlias = Literal["image/jpeg", "image/jpg", "image/png", "image/webp"]
SUPPORTED_MEDIA_TYPES: Final[tuple[str, ...]] = get_args(ImageMediaType)

DEFAULT_PROMPT: Final = (
    "Please give this image a concise, descriptive filename (without extension, "
    "max 30 characters, use hyphens instead of spaces). Only return the filename, "
    "nothing else."
)


def is_supported_media_type(value: str) -> TypeGuard[ImageMediaType]:
    """Check if a media type has its own decode path."""
    return value in SUPPORTED_MEDIA_TYPES


class FallbackNameType(StrEnum):
    """Naming scheme the caller applies when no AI name is produced."""

    DEFAULT = "default"
    INDEX = "index"  # prefix only
    ORIGIN = "origin"  # original upload name
    SHORT = "short"  # short link


class CompressionMode(StrEnum):
    """How the upload is reduced before it is sent to the vision API."""

    THUMBNAIL = "thumbnail"
    QUALITY_SEARCH = "quality_search"
    NONE = "none"


class ImageBuffer(BaseModel):
    """Raw upload bytes with the media type the uploader declared."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    media_type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


class PixelBuffer(BaseModel):
    """Decoded, interleaved pixel data.

    ``channels`` is 1 for greyscale and 3 for RGB; alpha is flattened during
    decoding so encoders never see it.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    channels: Literal[1, 3]
    data: bytes = Field(repr=False)

    @model_validator(mode="after")
    def check_buffer_length(self) -> Self:
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise ValueError(
                f"pixel buffer is {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}x{self.channels}"
            )
        return self

    @property
    def mode(self) -> Literal["L", "RGB"]:
        """Pillow mode string for this layout."""
        return "L" if self.channels == 1 else "RGB"

    @property
    def max_dimension(self) -> int:
        return max(self.width, self.height)


class EncodedCandidate(BaseModel):
    """One encoder output: bytes plus the quality level that produced them."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    media_type: str = "image/jpeg"
    quality: int | None = Field(default=None, ge=1, le=100)

    @property
    def size(self) -> int:
        return len(self.data)


class NamingConfig(BaseModel):
    """Per-invocation naming settings supplied by the upload handler."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    api_url: str = ""
    api_key: SecretStr = SecretStr("")
    model: str = "gpt-4o"
    prompt: str = DEFAULT_PROMPT
    timeout: int = Field(default=10_000, gt=0, description="Request timeout in milliseconds")
    max_retries: int = Field(default=2, ge=1)
    fallback_name_type: FallbackNameType = FallbackNameType.DEFAULT
    max_image_size: int | None = Field(
        default=None,
        gt=0,
        description="Largest source (bytes) that may be sent without compression",
    )
    retry_backoff: float = Field(
        default=1.0,
        ge=0,
        description="Seconds multiplied by the attempt number before each retry",
    )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000

    @property
    def is_configured(self) -> bool:
        """True when naming is switched on and has somewhere to send requests."""
        return self.enabled and bool(self.api_url.strip())
