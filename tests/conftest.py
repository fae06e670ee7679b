"""Shared pytest fixtures."""

import logging
import os
import random
import sys
from collections.abc import Callable
from io import BytesIO
from typing import Any

import pytest
import respx
from hypothesis import HealthCheck, settings
from PIL import Image

from image_namer.config import Settings
from image_namer.logging import configure_logging
from image_namer.models import NamingConfig

ImageFactory = Callable[..., bytes]

API_URL = "https://ai.example.test/v1/chat/completions"


def pytest_configure(config: pytest.Config) -> None:
    """Route debug logs to stderr and force line-buffered stdout when piped."""
    configure_logging(level=logging.DEBUG)
    if hasattr(sys.stdout, "reconfigure") and not sys.stdout.isatty():
        sys.stdout.reconfigure(line_buffering=True)


# Hypothesis settings profiles for different environments
settings.register_profile("fast", max_examples=25)
settings.register_profile(
    "ci",
    max_examples=300,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "fast"))


@pytest.fixture(autouse=True)
def _isolate_global_respx_router() -> Any:
    """Drop routes left on respx's global router so they cannot leak between tests."""
    yield
    respx.mock.clear()


@pytest.fixture(autouse=True)
def _isolate_settings_from_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent a local .env file from leaking into test Settings instances."""
    monkeypatch.setattr(
        Settings,
        "model_config",
        {**Settings.model_config, "env_file": None},
    )


def _render_image(
    width: int,
    height: int,
    fmt: str = "JPEG",
    *,
    mode: str = "RGB",
    color: Any = "red",
    noise: bool = False,
    seed: int = 0,
    **save_kwargs: Any,
) -> bytes:
    if noise:
        rng = random.Random(seed)
        channels = len(Image.new(mode, (1, 1)).getbands())
        img = Image.frombytes(mode, (width, height), rng.randbytes(width * height * channels))
    else:
        img = Image.new(mode, (width, height), color=color)
    buf = BytesIO()
    img.save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


@pytest.fixture
def make_image() -> ImageFactory:
    """Factory for encoded test images: ``make_image(w, h, fmt, mode=, color=, noise=)``."""
    return _render_image


@pytest.fixture
def naming_config() -> NamingConfig:
    """A configured NamingConfig with fast retries."""
    return NamingConfig(
        api_url=API_URL,
        api_key="sk-test",
        model="gpt-4o-mini",
        prompt="Name this image.",
        timeout=2_000,
        max_retries=2,
        retry_backoff=0.0,
    )

