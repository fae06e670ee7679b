"""AI filename generation for uploaded images."""

from image_namer.models import FallbackNameType, NamingConfig
from image_namer.pipeline import generate_ai_filename, prepare_image

__all__ = ["FallbackNameType", "NamingConfig", "generate_ai_filename", "prepare_image"]
