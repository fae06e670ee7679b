"""Sequential retries around a single naming request."""

import asyncio
from collections.abc import Awaitable, Callable

import httpx

from image_namer.errors import NamingError
from image_namer.logging import get_logger
from image_namer.models import NamingConfig
from image_namer.naming.client import request_filename

logger = get_logger(__name__)

NameRequest = Callable[..., Awaitable[str]]


async def request_filename_with_retry(
    data_uri: str,
    config: NamingConfig,
    *,
    client: httpx.AsyncClient | None = None,
    request: NameRequest = request_filename,
) -> str | None:
    """Try the naming request up to ``config.max_retries`` times.

    Every failure kind is retried. Before retry ``n + 1`` the loop waits
    ``n * config.retry_backoff`` seconds (linear: 1s, 2s, ... by default); there
    is no wait after the last attempt. The config field is labelled "exponential
    backoff" in the admin UI, but the delay grows linearly.

    Returns:
        The first non-empty filename, or None once all attempts have failed.
    """
    max_retries = config.max_retries
    for attempt in range(1, max_retries + 1):
        logger.debug("ai_naming_attempt", attempt=attempt, max_retries=max_retries)
        try:
            filename = await request(data_uri, config, client=client)
        except NamingError as e:
            logger.warning(
                "ai_naming_attempt_failed",
                attempt=attempt,
                max_retries=max_retries,
                error_kind=type(e).__name__,
                error=str(e),
            )
        except Exception:
            logger.error("ai_naming_unexpected_error", attempt=attempt, exc_info=True)
        else:
            if filename:
                logger.info("ai_naming_succeeded", attempt=attempt, filename=filename)
                return filename
            logger.warning("ai_naming_empty_filename", attempt=attempt)

        if attempt < max_retries:
            delay = config.retry_backoff * attempt
            logger.info("ai_naming_retry", next_attempt=attempt + 1, delay_s=delay)
            await asyncio.sleep(delay)

    logger.warning("ai_naming_exhausted", attempts=max_retries)
    return None
