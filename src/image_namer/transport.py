"""Base64 data-URI packaging for the naming request."""

import base64
from typing import Final

CHUNK_SIZE: Final = 8192  # bytes of input per encode step


def encode_base64_chunked(data: bytes, chunk_size: int = CHUNK_SIZE) -> str:
    """Standard base64 of ``data``, produced ``chunk_size`` input bytes at a time.

    Each step encodes at most one chunk plus a carried remainder of < 3 bytes, so
    no intermediate grows beyond a chunk regardless of input size. Output is
    identical to ``base64.b64encode(data)``.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    view = memoryview(data)
    parts: list[str] = []
    carry = b""
    for start in range(0, len(view), chunk_size):
        block = carry + view[start : start + chunk_size].tobytes()
        # Only whole 3-byte groups can be encoded without padding mid-stream
        usable = len(block) - len(block) % 3
        parts.append(base64.b64encode(block[:usable]).decode("ascii"))
        carry = block[usable:]
    if carry:
        parts.append(base64.b64encode(carry).decode("ascii"))
    return "".join(parts)


def build_data_uri(data: bytes, media_type: str) -> str:
    """Build ``data:<media_type>;base64,<payload>``."""
    return f"data:{media_type};base64,{encode_base64_chunked(data)}"
