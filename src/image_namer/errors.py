"""Failure kinds raised inside the naming pipeline.

None of these escape :func:`image_namer.pipeline.generate_ai_filename`; they are
caught at the retry loop or the pipeline boundary and turned into ``None``.
"""


class NamingError(Exception):
    """Base class for every recoverable image-naming failure."""


class DecodeError(NamingError):
    """Image bytes are corrupt or in an unsupported sub-format."""

    def __init__(self, media_type: str, reason: str) -> None:
        super().__init__(f"Cannot decode {media_type or 'unknown'} image: {reason}")
        self.media_type = media_type
        self.reason = reason


class EncodeBudgetExceeded(NamingError):
    """No attempted JPEG quality produced output within the byte ceiling."""

    def __init__(self, ceiling: int, smallest: int, min_quality: int) -> None:
        super().__init__(
            f"JPEG still {smallest} bytes at quality {min_quality} (ceiling {ceiling} bytes)"
        )
        self.ceiling = ceiling
        self.smallest = smallest
        self.min_quality = min_quality


class RequestTimeoutError(NamingError, TimeoutError):
    """The naming API did not answer within the configured timeout."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"AI naming request timed out after {timeout:.1f}s")
        self.timeout = timeout


class ApiError(NamingError):
    """The naming API answered with a non-2xx status, or could not be reached.

    ``status_code`` is None when the failure happened below HTTP (connection
    refused, TLS error, malformed response body).
    """

    def __init__(self, status_code: int | None, body: str) -> None:
        super().__init__(f"AI API error: {status_code} - {body}")
        self.status_code = status_code
        self.body = body


class EmptyResponseError(NamingError):
    """A well-formed response carried no usable filename text."""
