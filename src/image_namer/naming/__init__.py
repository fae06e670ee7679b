"""Vision-API naming: request, retry and filename sanitizing."""

from image_namer.naming.client import build_request_payload, request_filename
from image_namer.naming.retry import request_filename_with_retry
from image_namer.naming.sanitize import MAX_FILENAME_LENGTH, sanitize_filename

__all__ = [
    "MAX_FILENAME_LENGTH",
    "build_request_payload",
    "request_filename",
    "request_filename_with_retry",
    "sanitize_filename",
]
