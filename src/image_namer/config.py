"""Naming configuration using pydantic-settings."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from image_namer.imaging.encoder import (
    DEFAULT_SIZE_CEILING,
    THUMBNAIL_QUALITY,
    CompressionStrategy,
    get_strategy,
)
from image_namer.imaging.resampler import DEFAULT_MAX_DIMENSION
from image_namer.models import DEFAULT_PROMPT, CompressionMode, FallbackNameType, NamingConfig


class Settings(BaseSettings):
    """AI naming settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AI_NAMING_",
        extra="ignore",
    )

    enabled: bool = Field(default=False, description="Enable AI naming of uploads")

    # OpenAI-compatible chat completions endpoint
    api_url: str = Field(
        default="",
        description="Chat completions URL (e.g. https://api.openai.com/v1/chat/completions)",
    )
    api_key: SecretStr = Field(default=SecretStr(""), description="Bearer token for the API")
    model: str = Field(default="gpt-4o", description="Vision-capable model identifier")
    prompt: str = Field(default=DEFAULT_PROMPT)

    timeout: int = Field(default=10_000, gt=0, description="Request timeout in milliseconds")
    max_retries: int = Field(default=2, ge=1, le=10)
    fallback_name_type: FallbackNameType = Field(
        default=FallbackNameType.DEFAULT,
        description="Naming scheme the upload handler uses when AI naming fails",
    )
    max_image_size: int | None = Field(
        default=None,
        gt=0,
        description="Largest upload (bytes) that may be sent uncompressed",
    )

    # Thumbnail preparation
    compression: CompressionMode = Field(default=CompressionMode.THUMBNAIL)
    max_dimension: int = Field(default=DEFAULT_MAX_DIMENSION, ge=16, le=4096)
    thumbnail_quality: int = Field(default=THUMBNAIL_QUALITY, ge=1, le=100)
    size_ceiling: int = Field(
        default=DEFAULT_SIZE_CEILING,
        gt=0,
        description="Byte ceiling for the quality_search strategy",
    )

    def naming_config(self) -> NamingConfig:
        """Build the immutable per-invocation NamingConfig."""
        return NamingConfig(
            enabled=self.enabled,
            api_url=self.api_url,
            api_key=self.api_key,
            model=self.model,
            prompt=self.prompt,
            timeout=self.timeout,
            max_retries=self.max_retries,
            fallback_name_type=self.fallback_name_type,
            max_image_size=self.max_image_size,
        )

    def compression_strategy(self) -> CompressionStrategy | None:
        """Build the configured compression strategy (None for ``none``)."""
        return get_strategy(
            self.compression,
            max_dimension=self.max_dimension,
            thumbnail_quality=self.thumbnail_quality,
            ceiling=self.size_ceiling,
        )
